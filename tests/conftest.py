# Shared pytest fixtures
from __future__ import annotations
import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from brasindice_import.logging.init import reset_logging

# One well-formed BRASÍNDICE line (23 positional fields, unquoted values)
SAMPLE_FIELDS: list[str] = [
    "1234",                                 # 0 fabricante id
    "LABORATORIO TESTE LTDA",               # 1 fabricante nome
    "00456",                                # 2 brasindice id
    "DIPIRONA SODICA",                      # 3 descricao
    "0789",                                 # 4 brasindice code
    "500 mg/ml sol inj cx 50 amp x 2 ml",   # 5 apresentacao
    "125,50",                               # 6 PMC
    "98,75",                                # 7 PF
    "50",                                   # 8 quantidade
    "PMC",                                  # 9
    "2,51",                                 # 10 unit PMC
    "PFB",                                  # 11
    "1,98",                                 # 12 unit PFB
    "01/04/2024",                           # 13 ult. reajuste
    "0,00",                                 # 14 IPI
    "S",                                    # 15 dispensavel
    "7891234567890",                        # 16 EAN
    "90123456",                             # 17 TISS
    "",                                     # 18
    "90123457",                             # 19 TUSS
    "1234567890123",                        # 20 GGREM
    "1000000010001",                        # 21 ANVISA
    "MEDICAMENTOS",                         # 22 hierarquia
]


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _make_fields(overrides: dict[int, str] | None = None) -> list[str]:
    fields = list(SAMPLE_FIELDS)
    for index, value in (overrides or {}).items():
        fields[index] = value
    return fields


def _make_line(overrides: dict[int, str] | None = None, count: int | None = None) -> str:
    fields = _make_fields(overrides)
    if count is not None:
        fields = (fields + [""] * count)[:count]
    return ",".join(_quote(f) for f in fields)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def make_fields() -> Callable[..., list[str]]:
    return _make_fields


@pytest.fixture()
def make_line() -> Callable[..., str]:
    """Factory: ``make_line({3: "OTHER"})`` / ``make_line(count=20)``."""
    return _make_line


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_file: ./data/brasindice.txt
encoding: utf-8
fallback_encodings: [cp1252, latin-1]
strip_carriage_returns: true
batch_size: 2
tax_percentage: 20
reference_date: 2024-04-01
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_source(temp_workdir: Path) -> Callable[[list[str]], Path]:
    """Write lines to ./data/brasindice.txt (the path used by sample_config_yaml)."""
    def _write(lines: list[str], encoding: str = "utf-8") -> Path:
        path = temp_workdir / "data" / "brasindice.txt"
        path.write_bytes("\n".join(lines).encode(encoding))
        return path
    return _write
