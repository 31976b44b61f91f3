"""
Config document loading and conversion into typed records.

A document is a mapping with optional ``metadata``, ``table`` and ``shape``
sections. A flat mapping holding the table keys directly is treated as the
``table`` section. Keys may be snake_case or camelCase.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import asdict, fields, is_dataclass
from typing import Any

import yaml

from ..api.models import ShapeConfig, TableConfig
from .validation import validate_shape_section, validate_table_section

_TABLE_KEYS = {
    "first_row_expectation": ("first_row_expectation", "firstRowExpectation"),
    "min_col": ("min_col", "minCol"),
    "max_col": ("max_col", "maxCol"),
    "max_diff": ("max_diff", "maxDiff"),
}

_SHAPE_KEYS = {
    "strategy": ("strategy",),
    "sigma": ("sigma",),
    "sigma_min": ("sigma_min", "sigmaMin"),
    "sigma_max": ("sigma_max", "sigmaMax"),
    "skew_max": ("skew_max", "skewMax"),
    "peak_band": ("peak_band", "peakBand"),
    "band_weight": ("band_weight", "bandWeight"),
}


def load_config(config: Any) -> dict[str, Any]:
    """Parse a config from YAML text, a mapping, or a ``TableConfig``."""

    if isinstance(config, TableConfig):
        return {"metadata": {}, "table": asdict(config)}

    if isinstance(config, Mapping):
        return copy.deepcopy(dict(config))

    if isinstance(config, str):
        try:
            parsed = yaml.safe_load(config)
        except yaml.YAMLError as exc:
            raise ValueError(f"Config is not valid YAML: {exc}") from exc
        if parsed is None:
            raise ValueError("Config text is empty")
        if not isinstance(parsed, dict):
            raise ValueError("Config must parse to a mapping")
        return parsed

    raise TypeError("Config must be a TableConfig, dict or YAML string")


def _pick(section: Mapping[str, Any], aliases: Mapping[str, tuple[str, ...]]):
    out = {}
    for key, names in aliases.items():
        for name in names:
            if name in section:
                out[key] = section[name]
                break
    return out


def _section(document: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = document.get(name)
    if isinstance(section, Mapping):
        return section
    return {}


def metadata_section(document: Mapping[str, Any]) -> dict[str, Any]:
    return dict(_section(document, "metadata"))


def table_section(document: Mapping[str, Any]) -> dict[str, Any]:
    section = _section(document, "table")
    if not section:
        section = document
    return _pick(section, _TABLE_KEYS)


def shape_section(document: Mapping[str, Any]) -> dict[str, Any]:
    return _pick(_section(document, "shape"), _SHAPE_KEYS)


def build_table_config(document: Mapping[str, Any]) -> TableConfig:
    """Return the validated ``TableConfig`` described by ``document``.

    Raises ``ValueError`` listing every problem found.
    """

    section = table_section(document)
    _warnings, errors = validate_table_section(section)
    if errors:
        raise ValueError("; ".join(errors))

    max_diff = section.get("max_diff")
    return TableConfig(
        first_row_expectation=float(section["first_row_expectation"]),
        min_col=int(float(section["min_col"])),
        max_col=int(float(section["max_col"])),
        max_diff=None if max_diff is None else float(max_diff),
    )


def build_shape_config(
    document: Mapping[str, Any], override: ShapeConfig | Mapping[str, Any] | None = None
) -> ShapeConfig:
    """Merge the document's ``shape`` section with ``override`` (which wins)."""

    section = shape_section(document)
    if override is not None:
        if is_dataclass(override) and not isinstance(override, type):
            section.update({f.name: getattr(override, f.name) for f in fields(override)})
        elif isinstance(override, Mapping):
            section.update(_pick(override, _SHAPE_KEYS))

    _warnings, errors = validate_shape_section(section)
    if errors:
        raise ValueError("; ".join(errors))

    kwargs: dict[str, Any] = {}
    if "strategy" in section:
        kwargs["strategy"] = str(section["strategy"]).strip().lower()
    for key in ("sigma", "sigma_min", "sigma_max", "skew_max", "band_weight"):
        if section.get(key) is not None:
            kwargs[key] = float(section[key])
    band = section.get("peak_band")
    if band is not None:
        low, high = band
        kwargs["peak_band"] = (int(low), int(high))
    return ShapeConfig(**kwargs)
