from __future__ import annotations

from pathlib import Path

import pytest

from trupath.config.loader import ConfigError, load_config
from trupath.models.config_models import DEFAULT_DOMAIN_COLUMNS, DEFAULT_STRESS_WEIGHTS
from trupath.models.domain import ColumnList, ColumnRange, Domain


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert list(cfg.tools) == ["small"]
    tool = cfg.tools["small"]
    assert tool.workbook == Path("data/responses.xlsx")
    assert tool.sheet_name == "Form Responses 1"
    assert tool.processed_column == "Processed"
    assert tool.profile.domain_columns[Domain.INCOME] == ColumnList((2, 3))
    assert tool.profile.domain_columns[Domain.SPENDING] == ColumnRange(4, 5)
    assert tool.profile.domain_columns[Domain.DEBT] == ColumnList((6,))
    assert tool.profile.stress_weights[Domain.SPENDING] == 5
    assert tool.profile.priority_split == (2, 3)
    assert cfg.lock.timeout_seconds == 2.0
    assert cfg.lock.path == Path("logs/trupath.lock")


def test_defaults_when_domain_map_omitted(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "scoring.yml"
    cfg_path.write_text("tools:\n  fc:\n    workbook: data/fc.xlsx\n", encoding="utf-8")
    cfg = load_config(cfg_path)
    profile = cfg.tools["fc"].profile
    assert dict(profile.domain_columns) == dict(DEFAULT_DOMAIN_COLUMNS)
    assert dict(profile.stress_weights) == dict(DEFAULT_STRESS_WEIGHTS)
    assert profile.domain_columns[Domain.SPENDING] == ColumnRange(12, 15)
    assert profile.coerce_missing_as_zero is True


def test_legacy_pair_is_range_and_explicit_pair_is_list(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "scoring.yml"
    cfg_path.write_text(
        "tools:\n  t:\n    workbook: x.xlsx\n    domain_columns:\n"
        "      Savings: [33, 36]\n      Income: {columns: [6, 55]}\n"
        "    stress_weights: {Savings: 2, Income: 2}\n",
        encoding="utf-8",
    )
    profile = load_config(cfg_path).tools["t"].profile
    assert profile.domain_columns[Domain.SAVINGS] == ColumnRange(33, 36)
    assert profile.domain_columns[Domain.INCOME] == ColumnList((6, 55))
    assert profile.domains == [Domain.SAVINGS, Domain.INCOME]


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "scoring.yml"
    cfg_path.write_text("tools: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(cfg_path)


def test_load_config_missing_tools(temp_workdir: Path):
    cfg_path = temp_workdir / "config" / "scoring.yml"
    cfg_path.write_text("lock:\n  timeout_seconds: 3\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(cfg_path)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_unknown_domain(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("      Insurance: [11]\n", "      Crypto: [11]\n")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "extra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_missing_stress_weight_is_config_error(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("      Insurance: 1\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="missing stress weight for Insurance"):
        load_config(write_config)


def test_reversed_range_is_config_error(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("{range: [4, 5]}", "{range: [5, 4]}")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="tool 'small'"):
        load_config(write_config)


def test_normalization_rules_parsed(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "lock:\n",
        "    normalization:\n      - columns: [10]\n        start_row: 4\n        value_map: {1: 0, '2': 3}\nlock:\n",
    )
    write_config.write_text(text, encoding="utf-8")
    rule = load_config(write_config).tools["small"].normalization[0]
    assert rule.columns == (10,)
    assert rule.start_row == 4
    assert rule.value_map == {"1": 0, "2": 3}
    assert rule.status_column == "Normalized"


def test_normalization_status_column_parsed(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace(
        "lock:\n",
        "    normalization:\n      - columns: [10]\n        status_column: Q10 normalized\n        value_map: {1: 0}\nlock:\n",
    )
    write_config.write_text(text, encoding="utf-8")
    rule = load_config(write_config).tools["small"].normalization[0]
    assert rule.status_column == "Q10 normalized"
    assert rule.start_row == 2


def test_shipped_example_config_is_valid():
    example = Path(__file__).resolve().parents[2] / "config" / "scoring.yml"
    cfg = load_config(example)
    profile = cfg.tools["financial_clarity"].profile
    assert dict(profile.domain_columns) == dict(DEFAULT_DOMAIN_COLUMNS)
    assert dict(profile.stress_weights) == dict(DEFAULT_STRESS_WEIGHTS)
