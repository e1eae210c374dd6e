"""
footsim: Monte Carlo football match prediction.

Adjusts each side's recent scoring for match context, turns it into
recency-weighted expected goals, simulates full and half time with Poisson
draws and derives bet coupons from the simulated probabilities.
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover - exercised in packaging workflows
    __version__ = version("footsim")
except PackageNotFoundError:  # pragma: no cover - local editable installs
    __version__ = "0.0.0"

_EXPORTS = {
    # Engine
    "PredictionEngine": ".engine",
    "simulate_match": ".engine",
    # Components
    "ContextAdjuster": ".adjustment",
    "CouponGenerator": ".coupon",
    "MatchSimulator": ".simulation",
    "CancellationToken": ".simulation",
    "SimulationCancelled": ".simulation",
    "PoissonSampler": ".sampling",
    "recency_weighted_average": ".weighting",
    # Data model
    "AdjustmentFactors": ".models",
    "CompetitionType": ".models",
    "CouponEntry": ".models",
    "HeadToHeadRecord": ".models",
    "MatchContext": ".models",
    "MatchType": ".models",
    "PredictionReport": ".models",
    "SimulationResult": ".models",
    # Input handling
    "InvalidMatchInput": ".validation",
    "SimulationRequest": ".validation",
    "parse_head_to_head": ".validation",
    "parse_score_list": ".validation",
    "validate_request": ".validation",
    # History
    "SimulationHistory": ".history",
    # Configuration
    "FootsimConfig": ".config",
    "get_config": ".config",
    "configure_logging": ".logging",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> object:  # pragma: no cover - thin lazy importer
    from importlib import import_module

    target_module = _EXPORTS.get(name)
    if not target_module:
        raise AttributeError(f"module {__name__} has no attribute {name}")
    module = import_module(target_module, __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


def __dir__() -> list[str]:  # pragma: no cover - trivial
    return sorted(list(globals().keys()) + __all__)
