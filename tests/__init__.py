"""Test suite for footsim."""
