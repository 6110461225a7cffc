"""
Tuning - Live updates of controller configuration objects.

Controllers keep their penalties and multipliers in plain dataclasses.
These helpers read them as dictionaries and apply validated updates so
a host can retune a controller between decisions.
"""

from __future__ import annotations
from dataclasses import fields
from typing import Any


def config_values(config: Any) -> dict[str, Any]:
    """Field name -> value for a dataclass config object."""
    return {f.name: getattr(config, f.name) for f in fields(config)}


def apply_settings(config: Any, settings: dict[str, Any]) -> dict[str, Any]:
    """
    Update matching fields of a dataclass config in place.

    Returns the settings that were applied; keys that are not fields
    of the config are ignored and left for the caller.
    """
    consumed = {}
    names = {f.name for f in fields(config)}
    for key, value in settings.items():
        if key not in names:
            continue
        current = getattr(config, key)
        if isinstance(current, bool):
            if not isinstance(value, bool):
                raise ValueError(f"{key} must be a boolean")
        elif isinstance(current, int):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{key} must be a non-negative integer")
        consumed[key] = value

    # Nothing changes unless every setting is valid
    for key, value in consumed.items():
        setattr(config, key, value)
    return consumed


def reject_unknown(settings: dict[str, Any], known: set[str], owner: str):
    unknown = sorted(set(settings) - known)
    if unknown:
        raise ValueError(f"Unknown setting(s) for {owner}: {', '.join(unknown)}")
