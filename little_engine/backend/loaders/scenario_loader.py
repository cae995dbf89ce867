"""Scenario file loader (JSON, or YAML by extension)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..exceptions import ScenarioLoadError
from ..models import Scenario

logger = logging.getLogger(__name__)


def get_scenarios_path() -> Path:
    """Get the path to the bundled scenarios directory."""
    # 从 backend/loaders/ 向上两级到 little_engine，再进入 scenarios
    backend_dir = Path(__file__).parent.parent
    return backend_dir.parent / "scenarios"


def default_scenario_path() -> Path:
    return get_scenarios_path() / "case1.json"


def load_data_file(filepath: Path) -> Dict[str, Any]:
    """Load a single JSON or YAML document."""
    if not filepath.exists():
        raise ScenarioLoadError(f"File not found: {filepath} (check the exact spelling and case)")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            if filepath.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ScenarioLoadError(f"Malformed file {filepath}: {e}") from e
    except OSError as e:
        raise ScenarioLoadError(f"Cannot read {filepath}: {e}") from e

    if not isinstance(data, dict):
        raise ScenarioLoadError(f"Expected an object at the top of {filepath}")
    return data


def resolve_characters(entries: List[Any], base_dir: Path) -> List[Dict[str, Any]]:
    """角色可以内联，也可以是相对场景文件的路径"""
    characters = []
    for entry in entries:
        if isinstance(entry, str):
            path = Path(entry)
            if not path.is_absolute():
                path = base_dir / path
            characters.append(load_data_file(path))
        elif isinstance(entry, dict):
            characters.append(entry)
        else:
            raise ScenarioLoadError(f"Unsupported character entry: {entry!r}")
    return characters


def validate_scenario(scenario: Scenario) -> None:
    """检查场景的基本一致性"""
    if not scenario.characters:
        raise ScenarioLoadError("Scenario has no characters")

    character_ids = [c.id for c in scenario.characters]
    if any(not cid for cid in character_ids):
        raise ScenarioLoadError("Every character needs an id")
    if len(set(character_ids)) != len(character_ids):
        raise ScenarioLoadError("Duplicate character ids in scenario")

    evidence_ids = [e.id for e in scenario.evidences]
    if any(not eid for eid in evidence_ids) or len(set(evidence_ids)) != len(evidence_ids):
        raise ScenarioLoadError("Evidence ids must be present and unique")

    clue_ids = [c.id for c in scenario.time_clues]
    if len(set(clue_ids)) != len(clue_ids):
        raise ScenarioLoadError("Duplicate time clue ids in scenario")

    if scenario.case.culprit not in character_ids:
        raise ScenarioLoadError(f"Culprit {scenario.case.culprit!r} is not one of the characters")


def load_scenario(path: Path | str | None = None) -> Scenario:
    """Load, resolve and validate a scenario file."""
    filepath = Path(path) if path else default_scenario_path()
    data = load_data_file(filepath)

    if not isinstance(data.get("case"), dict):
        raise ScenarioLoadError(f"{filepath} is missing the 'case' section")

    entries = data.get("characters") or []
    if not isinstance(entries, list):
        raise ScenarioLoadError(f"'characters' in {filepath} must be a list")
    data = dict(data)
    data["characters"] = resolve_characters(entries, filepath.parent)

    try:
        scenario = Scenario.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise ScenarioLoadError(f"Invalid scenario data in {filepath}: {e}") from e

    validate_scenario(scenario)
    logger.info(
        "Loaded scenario %r: %d characters, %d evidences, %d time clues",
        scenario.case.title,
        len(scenario.characters),
        len(scenario.evidences),
        len(scenario.time_clues),
    )
    return scenario
