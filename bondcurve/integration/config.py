"""
Fail-closed loader for curve definitions stored in YAML.

Expected shape::

    curves:
      <name>:
        slope_numerator: <int>
        slope_denominator: <int>
        r0_numerator: <int>
        r0_denominator: <int>
        initial_bonded_balance: <int>

Unknown keys are rejected so that typos never silently fall back to defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..core.errors import InvalidCurveState
from ..core.types import LinearCurveParameters
from ..state.pools import PoolSnapshot

logger = logging.getLogger(__name__)

_PARAM_KEYS = ("slope_numerator", "slope_denominator", "r0_numerator", "r0_denominator")
_CURVE_KEYS = frozenset(_PARAM_KEYS + ("initial_bonded_balance",))


class ConfigError(ValueError):
    """Raised when a curve configuration file is malformed."""


@dataclass(frozen=True)
class CurveConfig:
    name: str
    params: LinearCurveParameters
    initial_bonded_balance: int

    def genesis(self) -> PoolSnapshot:
        return PoolSnapshot.create(self.params, self.initial_bonded_balance)


def _require_mapping(obj: Any, *, name: str) -> dict[str, Any]:
    if not isinstance(obj, dict):
        raise ConfigError(f"{name} must be a mapping")
    return obj


def _require_int(obj: Any, *, name: str) -> int:
    if not isinstance(obj, int) or isinstance(obj, bool):
        raise ConfigError(f"{name} must be an int")
    return obj


def _parse_curve(name: str, obj: Any) -> CurveConfig:
    body = _require_mapping(obj, name=f"curves.{name}")
    unknown = sorted(set(body) - _CURVE_KEYS)
    if unknown:
        raise ConfigError(f"curves.{name} has unknown keys: {', '.join(map(str, unknown))}")
    missing = sorted(_CURVE_KEYS - set(body))
    if missing:
        raise ConfigError(f"curves.{name} is missing keys: {', '.join(missing)}")

    values = {k: _require_int(body[k], name=f"curves.{name}.{k}") for k in _PARAM_KEYS}
    try:
        params = LinearCurveParameters(**values)
    except InvalidCurveState as exc:
        raise ConfigError(f"curves.{name}: {exc}") from exc

    bonded = _require_int(body["initial_bonded_balance"], name=f"curves.{name}.initial_bonded_balance")
    if bonded <= 0:
        raise ConfigError(f"curves.{name}.initial_bonded_balance must be positive")
    return CurveConfig(name=name, params=params, initial_bonded_balance=bonded)


def parse_curve_configs(root: Any) -> Dict[str, CurveConfig]:
    """Validate an already-decoded YAML document."""
    doc = _require_mapping(root, name="config")
    curves = _require_mapping(doc.get("curves"), name="config.curves")
    if not curves:
        raise ConfigError("config.curves must not be empty")

    out: Dict[str, CurveConfig] = {}
    for name, body in curves.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigError("curve names must be non-empty strings")
        out[name] = _parse_curve(name, body)
    return out


def load_curve_configs(path: Union[str, Path]) -> Dict[str, CurveConfig]:
    p = Path(path)
    raw = p.read_text(encoding="utf-8")
    try:
        root = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{p}: invalid YAML: {exc}") from exc
    configs = parse_curve_configs(root)
    logger.debug("loaded %d curve(s) from %s", len(configs), p)
    return configs
