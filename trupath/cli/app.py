from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.config_models import AppConfig
from ..scoring.errors import ScoringError
from ..services.orchestrator import ProcessingError, load_tool_dataset, process_all, score_row
from ..services.summary import render_summary_line

"""CLI entrypoint (``trupath-score`` / ``python -m trupath.cli``).

Flow:
- Load .env (python-dotenv), then the YAML config
- Score all unprocessed rows of the selected tools under the processing lock
- Print one SUMMARY line per tool and map the outcome to an exit code

``--row N`` prints one row's metrics as JSON without writing anything and
``--inspect-data`` prints each tool's header/column mapping.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV = "TRUPATH_CONFIG"


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env so TRUPATH_* settings can live next to the workbooks."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="TruPath domain scoring")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: ${CONFIG_ENV} or {DEFAULT_CONFIG_PATH})")
    p.add_argument("--tool", action="append", default=None, help="Tool name to run (repeatable; default: all)")
    p.add_argument("--row", type=int, default=None, help="Print metrics for one sheet row as JSON and exit")
    p.add_argument("--dry-run", action="store_true", help="Score rows without writing the workbook")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    return p.parse_args(argv)


def _resolve_config_path(arg: Path | None) -> Path:
    if arg is not None:
        return arg
    env = os.getenv(CONFIG_ENV)
    return Path(env) if env else DEFAULT_CONFIG_PATH


def _inspect_data(cfg: AppConfig, tool_names: list[str]) -> int:
    from ..excel.reader import MissingColumnError, find_column
    from ..models.metrics import metric_column_names

    for name in tool_names:
        tool = cfg.tools[name]
        print(f"TOOL: {name} workbook={tool.workbook} sheet={tool.sheet_name}")
        try:
            dataset = load_tool_dataset(tool)
        except ProcessingError as e:
            print(f"  read_error: {e}")
            continue
        header = dataset[0]
        print(f"  columns={len(header)} data_rows={len(dataset) - 1}")
        for domain, spec in tool.profile.domain_columns.items():
            cols = list(spec.columns())
            labels = [str(header[c - 1]) if c - 1 < len(header) else "<missing>" for c in cols]
            print(f"  {domain.value}: columns={cols} headers={labels}")
        for key in [tool.processed_column, *metric_column_names(tool.profile.domains)]:
            try:
                found = f"column {find_column(header, key)}"
            except MissingColumnError:
                found = "NOT FOUND"
            print(f"  {key} -> {found}")
        for row in dataset[1:4]:
            print("    sample_row=", [v.isoformat() if hasattr(v, "isoformat") else v for v in row])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None -> system arguments; [] stays empty (tests call main([]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug()
        logger.debug("debug mode enabled")

    config_path = _resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    tool_names = args.tool or list(cfg.tools)
    unknown = [n for n in tool_names if n not in cfg.tools]
    if unknown:
        logger.error(f"unknown tool(s): {', '.join(unknown)}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg, tool_names)

    if args.row is not None:
        if len(tool_names) != 1:
            logger.error("--row needs exactly one --tool")
            return EXIT_FATAL
        try:
            metrics = score_row(cfg.tools[tool_names[0]], args.row)
        except (ProcessingError, ScoringError) as e:
            logger.error(f"row {args.row}: {e}")
            return EXIT_FATAL
        print(json.dumps(metrics.to_dict(), ensure_ascii=False, indent=2))
        return EXIT_SUCCESS_ALL

    logger.info(f"Scoring tools: {', '.join(tool_names)}")
    try:
        results = process_all(cfg, tool_names, dry_run=args.dry_run)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for result in results:
        # log_summary adds the "SUMMARY " prefix itself
        log_summary(render_summary_line(result)[len("SUMMARY "):])

    if any(r.has_failures for r in results):
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
