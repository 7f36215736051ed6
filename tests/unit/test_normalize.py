from __future__ import annotations

from pathlib import Path

from trupath.excel.normalize import (
    apply_normalization,
    normalize_columns,
    normalize_value_key,
    normalized_rows,
)
from trupath.excel.reader import find_column, read_response_sheet
from trupath.excel.writer import save_response_sheet
from trupath.models.config_models import NormalizationRule, ToolConfig
from trupath.services.orchestrator import process_tool

VALUE_MAP = {"1": 0, "2": 3, "3": 4, "4": 5, "5": 5}


def test_value_key():
    assert normalize_value_key(2.0) == "2"
    assert normalize_value_key(2.5) == "2.5"
    assert normalize_value_key(" 3 ") == "3"
    assert normalize_value_key(None) is None


def test_normalize_columns_rewrites_from_start_row():
    dataset = [["Q"], [1], [2], [3.0], ["4"], [None], ["skip"]]
    rule = NormalizationRule(columns=(1,), value_map=VALUE_MAP, start_row=3)
    changed = normalize_columns(dataset, rule)
    assert [r[0] for r in dataset] == ["Q", 1, 3, 4, 5, None, "skip"]
    assert changed == 3


def test_normalize_columns_ignores_header_and_short_rows():
    dataset = [["1", "Q2"], [1], [2, 2]]
    rule = NormalizationRule(columns=(1, 2), value_map=VALUE_MAP, start_row=1)
    changed = normalize_columns(dataset, rule)
    assert dataset == [["1", "Q2"], [0], [3, 3]]
    assert changed == 3


def test_normalize_columns_limited_to_given_rows():
    dataset = [["Q"], [1], [2], [3]]
    rule = NormalizationRule(columns=(1,), value_map=VALUE_MAP)
    assert normalize_columns(dataset, rule, [3, 9]) == 1
    assert [r[0] for r in dataset[1:]] == [1, 3, 3]


def test_apply_normalization_marks_rows_and_skips_them_next_time():
    dataset = [["Q", "Processed"], [1, None], [2, True], [3, None]]
    rule = NormalizationRule(columns=(1,), value_map=VALUE_MAP)

    assert apply_normalization(dataset, [rule]) == 3
    assert dataset[0] == ["Q", "Processed", "Normalized"]
    assert [r[0] for r in dataset[1:]] == [0, 3, 4]
    assert normalized_rows(dataset, "Normalized") == {2, 3, 4}

    # second pass: nothing pending, values stay put
    assert apply_normalization(dataset, [rule]) == 0
    assert [r[0] for r in dataset[1:]] == [0, 3, 4]


def test_apply_normalization_new_rows_only():
    dataset = [["Q", "Normalized"], [3, True], [3, None]]
    rule = NormalizationRule(columns=(1,), value_map=VALUE_MAP)
    apply_normalization(dataset, [rule])
    assert [r[0] for r in dataset[1:]] == [3, 4]
    assert dataset[2][1] is True


def test_apply_normalization_rules_sharing_status_column():
    dataset = [["A", "B"], [1, 2]]
    rules = [
        NormalizationRule(columns=(1,), value_map=VALUE_MAP),
        NormalizationRule(columns=(2,), value_map=VALUE_MAP),
    ]
    assert apply_normalization(dataset, rules) == 2
    assert dataset[1] == [0, 3, True]


def test_apply_normalization_leaves_blank_rows_unmarked():
    dataset = [["Q"], [None], [2]]
    rule = NormalizationRule(columns=(1,), value_map=VALUE_MAP, status_column="Done")
    apply_normalization(dataset, [rule])
    assert normalized_rows(dataset, "Done") == {3}
    assert dataset[1] == [None, None]


def test_apply_normalization_without_rules_is_noop():
    dataset = [["Q"], [2]]
    assert apply_normalization(dataset, []) == 0
    assert dataset == [["Q"], [2]]


def _savings(path: Path) -> list[object]:
    dataset = read_response_sheet(path, "Form Responses 1")
    idx = find_column(dataset[0], "Sav") - 1
    return [row[idx] for row in dataset[1:]]


def test_repeated_runs_do_not_renormalize_answers(responses_workbook: Path, small_profile):
    # Savings answers are 3, 1, 2; the map is not idempotent
    rule = NormalizationRule(columns=(8,), value_map={"1": 0, "2": 3, "3": 4, "4": 5})
    tool = ToolConfig(name="small", workbook=responses_workbook, profile=small_profile, normalization=(rule,))

    process_tool(tool)
    assert _savings(responses_workbook) == [4, 0, 3]

    dataset = read_response_sheet(responses_workbook, "Form Responses 1")
    dataset.append(["Dan", 2, 2, 2, 2, 2, 2, 2, 2, 2, 2, None])
    save_response_sheet(responses_workbook, "Form Responses 1", dataset)

    result = process_tool(tool)
    assert result.scored_rows == 1
    assert _savings(responses_workbook) == [4, 0, 3, 3]

    process_tool(tool)
    assert _savings(responses_workbook) == [4, 0, 3, 3]
