from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_DOMAIN_COLUMNS,
    DEFAULT_PRIORITY_SPLIT,
    DEFAULT_STRESS_WEIGHTS,
    AppConfig,
    LockConfig,
    NormalizationRule,
    ScoringProfile,
    ToolConfig,
)
from ..models.domain import ColumnSpecError, Domain, parse_column_spec

"""Config loader.

Responsibilities:
- Load YAML config (default config/scoring.yml)
- Validate against the bundled JSON schema (scoring_schema.json)
- Apply defaults (financial clarity domain map / stress weights, 2/3 split)
- Build the immutable ToolConfig / ScoringProfile structures
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "parse_tool",
]

DEFAULT_CONFIG_PATH = Path("config/scoring.yml")
SCHEMA_PATH = Path(__file__).with_name("scoring_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"config validation failed at {where}: {e.message}") from e


def _parse_profile(name: str, raw: dict[str, Any]) -> ScoringProfile:
    if "domain_columns" in raw:
        try:
            columns = {
                Domain.from_name(d): parse_column_spec(spec)
                for d, spec in raw["domain_columns"].items()
            }
        except (ColumnSpecError, ValueError) as e:
            raise ConfigError(f"tool '{name}': {e}") from e
    else:
        columns = dict(DEFAULT_DOMAIN_COLUMNS)

    if "stress_weights" in raw:
        weights = {Domain.from_name(d): w for d, w in raw["stress_weights"].items()}
    else:
        weights = dict(DEFAULT_STRESS_WEIGHTS)

    missing = [d.value for d in columns if d not in weights]
    if missing:
        raise ConfigError(f"tool '{name}': missing stress weight for {', '.join(missing)}")

    split = tuple(raw.get("priority_split", DEFAULT_PRIORITY_SPLIT))
    if split[0] < 1:
        raise ConfigError(f"tool '{name}': priority_split needs at least one high priority domain")

    return ScoringProfile(
        domain_columns=columns,
        stress_weights=weights,
        priority_split=split,  # type: ignore[arg-type]
        coerce_missing_as_zero=raw.get("coerce_missing_as_zero", True),
    )


def _parse_normalization(raw: list[dict[str, Any]]) -> tuple[NormalizationRule, ...]:
    rules = []
    for item in raw:
        rules.append(
            NormalizationRule(
                columns=tuple(item["columns"]),
                value_map={str(k): v for k, v in item["value_map"].items()},
                start_row=item.get("start_row", 2),
                status_column=item.get("status_column", "Normalized"),
            )
        )
    return tuple(rules)


def parse_tool(name: str, raw: dict[str, Any]) -> ToolConfig:
    """Build a ToolConfig. Relative workbook paths stay relative to the working directory."""
    workbook = Path(raw["workbook"])
    return ToolConfig(
        name=name,
        workbook=workbook,
        profile=_parse_profile(name, raw),
        sheet_name=raw.get("sheet_name", "Form Responses 1"),
        processed_column=raw.get("processed_column", "Processed"),
        normalization=_parse_normalization(raw.get("normalization", [])),
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    tools = {name: parse_tool(name, raw) for name, raw in data["tools"].items()}

    lock_raw = data.get("lock", {})
    lock_path = Path(lock_raw.get("path", "logs/trupath.lock"))
    lock = LockConfig(path=lock_path, timeout_seconds=float(lock_raw.get("timeout_seconds", 30.0)))
    return AppConfig(tools=tools, lock=lock)
