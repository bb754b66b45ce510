from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

"""``python -m brasindice_import.cli`` runs the entrypoint exactly once, without runpy warnings."""

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _run_module(*args: str, cwd: Path) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    env.pop("BRASINDICE_CONFIG", None)
    return subprocess.run(
        [sys.executable, "-W", "error::RuntimeWarning", "-m", "brasindice_import.cli", *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )


def test_module_help_has_no_runpy_warning(tmp_path: Path):
    proc = _run_module("--help", cwd=tmp_path)
    assert proc.returncode == 0, proc.stderr
    assert "RuntimeWarning" not in proc.stderr
    assert "--validate-only" in proc.stdout


def test_module_run_prints_single_summary(write_config, write_source, make_line, temp_workdir: Path):
    write_source([make_line()])
    proc = _run_module(cwd=temp_workdir)

    assert proc.returncode == 0, proc.stderr
    summary = [line for line in proc.stdout.splitlines() if line.startswith("SUMMARY")]
    assert len(summary) == 1


def test_importing_cli_package_does_not_load_entrypoint(tmp_path: Path):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
    code = "import sys, brasindice_import.cli; print('brasindice_import.cli.__main__' in sys.modules)"
    proc = subprocess.run(
        [sys.executable, "-c", code], cwd=tmp_path, env=env, capture_output=True, text=True, timeout=60
    )
    assert proc.stdout.strip() == "False"
