"""Tunable thresholds for meter classification and line scansion.

The defaults were calibrated against strict historical verse (Shakespeare,
Blake) and imagist free verse. Every field can be overridden from the
environment as ``SCANSION_<FIELD_NAME>`` (e.g. ``SCANSION_MIN_REGULARITY=70``);
values that fail to parse fall back to the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

_ENV_PREFIX = "SCANSION_"


def _env_int(name: str, default: int, environ: Mapping[str, str]) -> int:
    try:
        return int(environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float, environ: Mapping[str, str]) -> float:
    try:
        return float(environ.get(name, default))
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ClassifierSettings:
    """Thresholds consulted by the classifier, scanner and resolver."""

    # Winning meter score (fraction of agreeing syllables) needed for "metrical".
    min_confidence: float = 0.75
    # Percentage of lines within tolerance of the winning hypothesis.
    min_regularity: int = 60
    # Base scores closer than this are treated as a tie.
    tie_epsilon: float = 0.02
    # Shorter lines are ignored when scoring hypotheses.
    min_line_syllables: int = 4
    max_feet: int = 8
    # Short-line guard: imagist verse made of very short lines is free verse.
    short_line_average: float = 4.0
    short_line_ratio: float = 0.6
    # A scanned line still "follows" the meter with up to this share of
    # fixed-stress mismatches.
    max_line_mismatch_ratio: float = 0.25
    resolver_cache_size: int = 4096

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClassifierSettings":
        """Build settings from ``SCANSION_*`` variables in ``environ``."""

        source = os.environ if environ is None else environ
        defaults = cls()
        overrides: Dict[str, Any] = {}
        for setting in fields(cls):
            env_name = f"{_ENV_PREFIX}{setting.name.upper()}"
            if env_name not in source:
                continue
            default = getattr(defaults, setting.name)
            if isinstance(default, int):
                overrides[setting.name] = _env_int(env_name, default, source)
            else:
                overrides[setting.name] = _env_float(env_name, default, source)
        return cls(**overrides)


DEFAULT_SETTINGS = ClassifierSettings()

__all__ = ["ClassifierSettings", "DEFAULT_SETTINGS"]
