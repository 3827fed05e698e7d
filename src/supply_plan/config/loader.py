import json
from pathlib import Path
from typing import Any


def load_planning_config(config_path: str | None = None) -> dict[str, Any]:
    """
    Loads strategy stock policies, outlier z-scores, safety stock defaults
    and observer verbosity for a planning run.

    Without a path, reads the planning_config.json bundled with this package.
    """
    if config_path is None:
        # Default to the file next to this script
        final_path = Path(__file__).parent / "planning_config.json"
    else:
        final_path = Path(config_path)

    with open(final_path) as f:
        data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError(f"Expected dict from {final_path}, got {type(data)}")
        return data


def planning_parameters(config: dict[str, Any] | None) -> dict[str, Any]:
    """Returns the planning_parameters section, or {} when absent."""
    if config is None:
        return {}
    params = config.get("planning_parameters", {})
    if not isinstance(params, dict):
        raise TypeError(f"Expected dict for planning_parameters, got {type(params)}")
    return params
