#!/usr/bin/env python3
"""Sample response workbook generator.

Builds a synthetic "Form Responses 1" sheet laid out like the financial
clarity form, so the scorer can be tried end to end without real data:
- Row 1: header (Timestamp, Email, Name, Q4..Q57, Processed)
- Row 2+: one response per row, answers in the 0..5 range

The answer columns match the default domain map in
trupath.models.config_models.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

ANSWER_COLUMNS = 57  # last scored column (Retirement uses 57)


def generate_responses(rows: int, seed: int = 42, processed_ratio: float = 0.0) -> pd.DataFrame:
    """Generate a response DataFrame whose column order is the sheet layout.

    Args:
        rows: Number of responses
        seed: Random seed for reproducible data
        processed_ratio: Share of rows pre-marked as processed
    """
    rng = np.random.default_rng(seed)

    data: dict[str, list[object]] = {}
    stamps = pd.date_range("2024-01-01", periods=rows, freq="h")
    data["Timestamp"] = list(stamps.to_pydatetime())
    data["Email"] = [f"participant{i + 1}@example.com" for i in range(rows)]
    data["Name"] = [f"Participant {i + 1}" for i in range(rows)]
    for col in range(4, ANSWER_COLUMNS + 1):
        data[f"Q{col}"] = rng.integers(0, 6, rows).tolist()

    processed = rng.random(rows) < processed_ratio
    data["Processed"] = [True if p else None for p in processed]
    return pd.DataFrame(data)


def create_workbook(output_path: Path, rows: int, sheet_name: str = "Form Responses 1", seed: int = 42,
                    processed_ratio: float = 0.0) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = generate_responses(rows, seed, processed_ratio)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)

    print(f"Created workbook: {output_path}")
    print(f"  Sheet: {sheet_name}")
    print(f"  Responses: {rows} (+ 1 header row)")
    print(f"  Columns: {len(df.columns)}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic response workbook for the scorer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/financial_clarity.xlsx --rows 50
  %(prog)s data/fc.xlsx --rows 200 --processed-ratio 0.5 --seed 7
        """
    )
    parser.add_argument("output", type=Path, help="Output workbook path")
    parser.add_argument("--rows", type=int, default=25, help="Number of responses (default: 25)")
    parser.add_argument("--sheet", default="Form Responses 1", help="Sheet name")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--processed-ratio", type=float, default=0.0,
                        help="Share of rows already marked processed (default: 0)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.processed_ratio <= 1.0:
        print("Error: --processed-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    create_workbook(args.output, args.rows, args.sheet, args.seed, args.processed_ratio)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
