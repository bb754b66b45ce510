from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from dataclasses import asdict
from pathlib import Path
from uuid import uuid4

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, ImportConfig, load_config
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..services.file_parser import parse
from ..services.importer import import_rows
from ..services.payload import to_reference_item_payload
from ..services.progress import ImportProgressBar
from ..services.reader import SourceReadError, read_brasindice_file
from ..services.summary import render_summary_line
from ..services.validator import validate
from ..store.reference_store import InMemoryReferenceItemStore

"""CLI entrypoint: validate, parse and dry-run import a BRASÍNDICE export.

Flow:
- Load .env and the YAML config
- Read + decode the source file, run the pre-flight validation
- Parse, write rejected rows to the JSON Lines error log
- Import into an in-memory reference-item store and print the SUMMARY line
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV_VAR = "BRASINDICE_CONFIG"
INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv. Failure only warns."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        logging.getLogger(__name__).warning(f"failed to load .env: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="BRASÍNDICE price table importer")
    p.add_argument("--config", type=Path, default=None, help="YAML config path")
    p.add_argument("--file", type=Path, default=None, help="Override source_file from config")
    p.add_argument("--validate-only", action="store_true", help="Run the pre-flight check and exit")
    p.add_argument("--inspect-data", action="store_true", help="Print the first parsed rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config_path(args: argparse.Namespace) -> Path:
    if args.config is not None:
        return args.config
    env_path = os.getenv(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def _inspect_data(cfg: ImportConfig, text: str) -> int:
    result = parse(text, strip_carriage_returns=cfg.strip_carriage_returns)
    print(f"rows={result.stats.total} parsed={result.stats.parsed} errors={result.stats.errors}")
    for row in result.rows[:INSPECT_SAMPLE_ROWS]:
        payload = asdict(to_reference_item_payload(row))
        print(f"  {row.external_code}: {json.dumps(payload, ensure_ascii=False)}")
    for error in result.errors[:INSPECT_SAMPLE_ROWS]:
        print(f"  row {error.row}: {error.error_type} {error.message}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # 空リスト [] が渡された場合に sys.argv を読まないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    config_path = _resolve_config_path(args)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    source_path = args.file if args.file is not None else Path(cfg.source_file)
    try:
        source = read_brasindice_file(source_path, cfg.encoding, cfg.fallback_encodings)
    except SourceReadError as e:
        logger.error(f"source: {e}")
        return EXIT_FATAL

    validation = validate(
        source.text, source.size_bytes, strip_carriage_returns=cfg.strip_carriage_returns
    )
    logger.info(
        f"file={source_path.name} encoding={source.encoding} size_kb={validation.file_size_kb} "
        f"rows={validation.row_count} estimated_sec={validation.estimated_duration_seconds}"
    )
    if not validation.is_valid:
        logger.error(f"validation: {validation.message}")
        return EXIT_FATAL
    if args.validate_only:
        logger.info(validation.message)
        return EXIT_SUCCESS_ALL

    if args.inspect_data:
        return _inspect_data(cfg, source.text)

    started = time.perf_counter()
    parse_result = parse(source.text, strip_carriage_returns=cfg.strip_carriage_returns)
    logger.info(
        f"parsed rows={parse_result.stats.parsed}/{parse_result.stats.total} "
        f"errors={parse_result.stats.errors}"
    )

    # 永続化はデプロイ側の責務。CLI はインメモリストアでドライランする
    store = InMemoryReferenceItemStore()
    with ImportProgressBar(len(parse_result.rows)) as bar:
        import_result = import_rows(
            parse_result,
            store,
            import_batch_id=uuid4().hex,
            reference_date=cfg.effective_reference_date(),
            tax_percentage=cfg.tax_percentage,
            batch_size=cfg.batch_size,
            on_progress=bar,
        )
    elapsed = time.perf_counter() - started

    error_log = ErrorLogBuffer(Path(cfg.logs_directory))
    error_log.extend_from_parse_errors(source_path.name, import_result.errors)
    error_count = len(error_log)
    log_path = error_log.flush()
    if log_path is not None:
        logger.warning(f"{error_count} error(s) written to {log_path}")

    summary_line = render_summary_line(parse_result, import_result, elapsed)
    # log_summary が "SUMMARY " を付与するため先頭を除去
    log_summary(summary_line[len("SUMMARY "):])

    if import_result.success:
        return EXIT_SUCCESS_ALL
    return EXIT_PARTIAL_FAILURE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
