from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..services.importer import DEFAULT_BATCH_SIZE
from ..services.reader import DEFAULT_ENCODING, DEFAULT_FALLBACK_ENCODINGS

"""Config loader for the import CLI.

Responsibilities:
- Load YAML (default ``config/import.yml``)
- Validate against the bundled JSON schema (``import_schema.json``)
- Apply defaults for every optional key
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "ImportConfig",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/import.yml")
SCHEMA_PATH = Path(__file__).parent / "import_schema.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ImportConfig:
    source_file: str
    encoding: str = DEFAULT_ENCODING
    fallback_encodings: tuple[str, ...] = DEFAULT_FALLBACK_ENCODINGS
    strip_carriage_returns: bool = True
    batch_size: int = DEFAULT_BATCH_SIZE
    tax_percentage: float = 20
    reference_date: date | None = None  # None -> day of the run (UTC)
    logs_directory: str = "./logs"

    def effective_reference_date(self) -> date:
        return self.reference_date or datetime.now(UTC).date()


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not JSON, or data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _parse_reference_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ConfigError(f"invalid reference_date: {value}") from e


def load_config(path: Path) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (yaml.YAMLError, ValueError) as e:
        # ValueError: YAML timestamps that are not real dates (2024-02-30)
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    # YAML は日付を date 型で読むため、スキーマ検証前に文字列へ戻す
    if isinstance(data.get("reference_date"), date):
        data["reference_date"] = data["reference_date"].isoformat()

    _validate_config_schema(data)

    fallbacks = data.get("fallback_encodings")
    return ImportConfig(
        source_file=data["source_file"],
        encoding=data.get("encoding", DEFAULT_ENCODING),
        fallback_encodings=tuple(fallbacks) if fallbacks is not None else DEFAULT_FALLBACK_ENCODINGS,
        strip_carriage_returns=data.get("strip_carriage_returns", True),
        batch_size=data.get("batch_size", DEFAULT_BATCH_SIZE),
        tax_percentage=data.get("tax_percentage", 20),
        reference_date=_parse_reference_date(data.get("reference_date")),
        logs_directory=data.get("logs_directory", "./logs"),
    )
