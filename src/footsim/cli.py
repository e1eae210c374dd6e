"""Command line interface for the football match simulator."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import inspect
import json
import logging
import sys
from typing import Awaitable, Callable, Sequence, TypeVar

from .config import ConfigurationError, FootsimConfig, load_config, validate_config
from .engine import PredictionEngine
from .logging import configure_logging
from .models import CompetitionType, MatchType
from .validation import (
    InvalidMatchInput,
    parse_head_to_head,
    parse_score_list,
    validate_request,
)

logger = logging.getLogger(__name__)

CommandHandler = Callable[[FootsimConfig, argparse.Namespace], Awaitable[None]]

HandlerT = TypeVar("HandlerT", bound=CommandHandler)


@dataclasses.dataclass(slots=True)
class Subcommand:
    """Container describing a CLI sub-command."""

    name: str
    help: str
    configure: Callable[[argparse.ArgumentParser], None]
    handler: CommandHandler

    def add_to_parser(
        self,
        subparsers,
        parent: argparse.ArgumentParser,
    ) -> argparse.ArgumentParser:
        """Create the parser for this subcommand."""

        parser = subparsers.add_parser(self.name, parents=[parent], help=self.help)
        self.configure(parser)
        parser.set_defaults(handler=self.handler, command=self.name)
        return parser


class SubcommandApp:
    """Registry that wires handlers into an :class:`argparse` parser."""

    def __init__(self, description: str | None = None) -> None:
        self._commands: list[Subcommand] = []
        self._description = description

    def command(
        self,
        name: str,
        *,
        help: str,
        configure: Callable[[argparse.ArgumentParser], None],
    ) -> Callable[[HandlerT], HandlerT]:
        """Register ``handler`` as a sub-command with configuration callback."""

        def _decorator(handler: HandlerT) -> HandlerT:
            if not inspect.iscoroutinefunction(handler):
                raise TypeError("Command handlers must be coroutine functions")
            self._commands.append(
                Subcommand(name=name, help=help, configure=configure, handler=handler)
            )
            return handler

        return _decorator

    @property
    def commands(self) -> Sequence[Subcommand]:
        return tuple(self._commands)

    def build_parser(self) -> argparse.ArgumentParser:
        parent = argparse.ArgumentParser(add_help=False)
        parent.add_argument("--config", dest="config_file")
        parent.add_argument("--log-level", dest="log_level")

        parser = argparse.ArgumentParser(prog="footsim", description=self._description)
        subparsers = parser.add_subparsers(dest="command", required=True)
        for command in self._commands:
            command.add_to_parser(subparsers, parent)
        return parser


APP = SubcommandApp(description=__doc__)


def _configure_simulate_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("team_a")
    parser.add_argument("team_b")
    parser.add_argument("--scores-a", required=True, help='recent goals, oldest first: "2,1,3"')
    parser.add_argument("--scores-b", required=True, help='recent goals, oldest first: "1,0,1"')
    parser.add_argument("--h2h", default="", help='previous meetings: "2-1,0-0"')
    parser.add_argument("--home", choices=["a", "b", "none"], default="none")
    parser.add_argument(
        "--match-type",
        choices=[member.value for member in MatchType],
        default=MatchType.FRIENDLY.value,
    )
    parser.add_argument("--rank-a", type=int)
    parser.add_argument("--rank-b", type=int)
    parser.add_argument(
        "--competition-type", choices=[member.value for member in CompetitionType]
    )
    parser.add_argument("--knockout", action="store_true", default=False)
    parser.add_argument("--alpha", type=float)
    parser.add_argument("--iterations", type=int)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--progress", action="store_true", default=False)


def _configure_config_parser(parser: argparse.ArgumentParser) -> None:
    del parser


def _print_progress(percent: int) -> None:
    print(f"\rprogress: {percent:3d}%", end="", file=sys.stderr, flush=True)
    if percent >= 100:
        print(file=sys.stderr)


@APP.command(
    "simulate",
    help="Simulate a fixture and print the prediction report",
    configure=_configure_simulate_parser,
)
async def _cmd_simulate(config: FootsimConfig, args: argparse.Namespace) -> None:
    if args.seed is not None:
        config = config.model_copy(update={"seed": args.seed})
    try:
        request = validate_request(
            {
                "team_a_name": args.team_a,
                "team_b_name": args.team_b,
                "scores_a": parse_score_list(args.scores_a, "scores for team A"),
                "scores_b": parse_score_list(args.scores_b, "scores for team B"),
                "h2h_scores": parse_head_to_head(args.h2h),
                "is_home_team_a": args.home == "a",
                "is_home_team_b": args.home == "b",
                "match_type": args.match_type,
                "alpha": config.default_alpha if args.alpha is None else args.alpha,
                "iterations": (
                    config.default_iterations if args.iterations is None else args.iterations
                ),
                "rank_a": args.rank_a,
                "rank_b": args.rank_b,
                "competition_type": args.competition_type,
                "is_knockout_stage": args.knockout,
            }
        )
    except InvalidMatchInput as exc:
        raise SystemExit(str(exc)) from exc
    engine = PredictionEngine(config)
    progress = _print_progress if args.progress else None
    report = await engine.predict_async(request, progress)
    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))


@APP.command(
    "config",
    help="Show the effective configuration",
    configure=_configure_config_parser,
)
async def _cmd_config(config: FootsimConfig, args: argparse.Namespace) -> None:
    del args
    warnings = validate_config(config)
    print(
        json.dumps(
            {"config": config.model_dump(mode="json"), "warnings": warnings},
            indent=2,
        )
    )


def _build_parser() -> argparse.ArgumentParser:
    return APP.build_parser()


async def _dispatch(args: argparse.Namespace) -> None:
    try:
        config = load_config(args.config_file)
    except (FileNotFoundError, TypeError) as exc:
        raise SystemExit(f"Cannot load configuration: {exc}") from exc
    configure_logging((args.log_level or config.log_level).upper())
    try:
        warnings = validate_config(config)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc
    for message in warnings:
        logger.warning("[config-warning] %s", message)
    handler: CommandHandler = args.handler
    await handler(config, args)


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    asyncio.run(_dispatch(args))


__all__ = ["main"]


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
