"""Scenario loaders for the mystery game."""

from .scenario_loader import (
    default_scenario_path,
    get_scenarios_path,
    load_data_file,
    load_scenario,
    resolve_characters,
    validate_scenario,
)

__all__ = [
    "default_scenario_path",
    "get_scenarios_path",
    "load_data_file",
    "load_scenario",
    "resolve_characters",
    "validate_scenario",
]
