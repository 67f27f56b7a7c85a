"""
Plain-text environment report for troubleshooting tool discovery.

Runs `which` and `--version` for npx, node and ccusage under the same
extended PATH the prober uses, and records how this process was launched.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import List, Optional

import psutil

from .prober import Runner, with_extended_path

log = logging.getLogger(__name__)

_TOOL_CHECKS = (
    ("which npx", "npx location"),
    ("which node", "node location"),
    ("which ccusage", "ccusage location"),
    ("npx --version", "npx version"),
    ("node --version", "node version"),
    ("ccusage --version 2>&1 || echo 'not found'", "ccusage version"),
)


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace").strip()
    return str(data).strip()


def _parent_process_name() -> str:
    try:
        parent = psutil.Process().parent()
        return parent.name() if parent is not None else "(none)"
    except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
        return f"unknown ({e.__class__.__name__})"


def _run_shell(runner: Runner, command: str, timeout: Optional[float]):
    return runner(
        ["sh", "-c", command],
        stdin=subprocess.DEVNULL,
        capture_output=True,
        timeout=timeout,
    )


def build_debug_report(
    extended_path: str,
    runner: Runner = subprocess.run,
    timeout: Optional[float] = None,
) -> str:
    lines: List[str] = ["Environment:"]
    lines.append(f"Default PATH: {os.environ.get('PATH', '(not set)')}")
    lines.append(f"Extended PATH used: PATH={extended_path}:$PATH")
    lines.append(f"Launched by: {_parent_process_name()}")
    lines.append("")

    lines.append("Command availability (with extended PATH):")
    for command, desc in _TOOL_CHECKS:
        try:
            result = _run_shell(runner, with_extended_path(extended_path, command), timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            lines.append(f"{desc}: error - {e}")
            continue
        if result.returncode == 0:
            lines.append(f"{desc}: {_decode(result.stdout)}")
        else:
            stderr = _decode(result.stderr)
            lines.append(f"{desc}: {stderr or 'not found'}")

    lines.append("")
    lines.append("Testing ccusage:")
    try:
        result = _run_shell(runner, with_extended_path(extended_path, "npx ccusage@latest --version"), timeout)
    except (OSError, subprocess.TimeoutExpired) as e:
        lines.append(f"Error executing ccusage: {e}")
    else:
        if result.returncode == 0:
            lines.append(f"ccusage version: {_decode(result.stdout)}")
        else:
            lines.append("ccusage: not available (npx ccusage@latest failed)")
            stderr = _decode(result.stderr)
            if stderr:
                lines.append(f"Error: {stderr}")

    return "\n".join(lines) + "\n"
