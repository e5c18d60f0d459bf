from __future__ import annotations

# ---- Parameter-set configuration: JSON files and key=value overrides ----
import json
import os
from dataclasses import fields, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from .types import BuckParams

_PARAM_FIELDS = {f.name for f in fields(BuckParams)}
_INT_FIELDS = {"steps_per_period"}
# Fields that accept JSON null / "none" on the command line
_NULLABLE_FIELDS = {"dt", "tj_init"}


def _coerce(key: str, value: Any) -> Any:
    if value is None:
        if key not in _NULLABLE_FIELDS:
            raise ValueError(f"{key} must not be null")
        return None
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got bool")
    if key in _INT_FIELDS:
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"{key} must be an integer")
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{key} must be an integer: {e}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be a number: {e}")


def params_from_dict(raw: Dict[str, Any], base: Optional[BuckParams] = None) -> BuckParams:
    """
    Build a validated BuckParams from a flat mapping of field names.

    Missing fields keep the value from `base` (defaults when None).

    Raises:
      ValueError for unknown keys or non-numeric values,
      InvalidParameterError for physical precondition violations.
    """
    if not isinstance(raw, dict):
        raise ValueError("parameter mapping must be a dict")
    extra = sorted(k for k in raw.keys() if k not in _PARAM_FIELDS)
    if extra:
        raise ValueError(f"unknown parameter keys: {extra}")
    kwargs = {k: _coerce(k, v) for k, v in raw.items()}
    params = replace(base if base is not None else BuckParams(), **kwargs)
    params.validate()
    return params


def load_params_from_json(path: str) -> Tuple[BuckParams, Optional[str]]:
    """
    Load a scenario JSON file into (params, scenario_id).

    Layout: a flat JSON object whose keys are BuckParams field names, plus an
    optional "scenario_id" string. Absent fields take their defaults.

    Raises:
      ValueError with a clear message for a missing file, bad JSON, unknown keys
      or malformed values; InvalidParameterError for rejected physics.
    """
    if not isinstance(path, str) or not path:
        raise ValueError("load_params_from_json: path must be a non-empty string")
    if not os.path.exists(path):
        raise ValueError(f"load_params_from_json: file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"load_params_from_json: failed to parse JSON: {e}")

    if not isinstance(raw, dict):
        raise ValueError("scenario root must be a JSON object")

    scenario_id = raw.pop("scenario_id", None)
    if scenario_id is not None and not isinstance(scenario_id, str):
        raise ValueError("scenario_id must be a string when present")
    return params_from_dict(raw), scenario_id


def parse_overrides(items: Iterable[str]) -> Dict[str, Any]:
    """Parse CLI 'key=value' strings; value 'none' maps to None."""
    out: Dict[str, Any] = {}
    for item in items:
        if "=" not in item:
            raise ValueError(f"override must be key=value, got {item!r}")
        key, val = item.split("=", 1)
        key = key.strip()
        val = val.strip()
        if not key:
            raise ValueError(f"override key must be non-empty: {item!r}")
        out[key] = None if val.lower() == "none" else val
    return out
