# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from trupath.logging.init import reset_logging
from trupath.models.config_models import ScoringProfile
from trupath.models.domain import ColumnList, ColumnRange, Domain

# Small sheet used across tests: one or two answer columns per domain.
#   1 Name | 2-3 Income | 4-5 Spending | 6 Debt | 7 EmergencyFund | 8 Savings
#   9 Investments | 10 Retirement | 11 Insurance | 12 Processed
HEADER = ["Name", "Inc1", "Inc2", "Spend1", "Spend2", "Debt", "Emerg", "Sav", "Inv", "Ret", "Ins", "Processed"]
ROWS = [
    ["Alice", 5, 5, 1, 1, 0, 2, 3, 1, 4, 2, None],
    ["Bob", 1, 1, 4, 4, 3, 2, 1, 1, 2, 2, None],
    ["Cara", 3, 3, 4, 4, 3, 2, 2, 4, 3, 2, True],
]

SMALL_DOMAIN_COLUMNS = {
    Domain.INCOME: ColumnList((2, 3)),
    Domain.SPENDING: ColumnRange(4, 5),
    Domain.DEBT: ColumnList((6,)),
    Domain.EMERGENCY_FUND: ColumnList((7,)),
    Domain.SAVINGS: ColumnList((8,)),
    Domain.INVESTMENTS: ColumnList((9,)),
    Domain.RETIREMENT: ColumnList((10,)),
    Domain.INSURANCE: ColumnList((11,)),
}


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("TRUPATH_CONFIG", raising=False)
        yield p


@pytest.fixture()
def small_dataset() -> list[list[object]]:
    return [list(HEADER)] + [list(r) for r in ROWS]


@pytest.fixture()
def small_profile() -> ScoringProfile:
    return ScoringProfile(domain_columns=SMALL_DOMAIN_COLUMNS)


@pytest.fixture()
def make_workbook() -> Callable[..., Path]:
    def _make(path: Path, rows: list[list[object]], sheet_name: str = "Form Responses 1",
              extra_sheets: dict[str, list[list[object]]] | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
            for name, extra in (extra_sheets or {}).items():
                pd.DataFrame(extra).to_excel(writer, sheet_name=name, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def sample_config_yaml() -> str:
    return """tools:
  small:
    workbook: data/responses.xlsx
    sheet_name: Form Responses 1
    processed_column: Processed
    domain_columns:
      Income: {columns: [2, 3]}
      Spending: {range: [4, 5]}
      Debt: [6]
      EmergencyFund: [7]
      Savings: [8]
      Investments: [9]
      Retirement: [10]
      Insurance: [11]
    stress_weights:
      Income: 2
      Spending: 5
      Debt: 4
      EmergencyFund: 3
      Savings: 2
      Investments: 1
      Retirement: 1
      Insurance: 1
lock:
  path: logs/trupath.lock
  timeout_seconds: 2
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "scoring.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def responses_workbook(temp_workdir: Path, make_workbook, small_dataset) -> Path:
    return make_workbook(temp_workdir / "data" / "responses.xlsx", small_dataset)
