"""
Locate and run the `ccusage` CLI.

The tool may be installed through npx, a global npm install, nvm or volta,
and a GUI process usually starts without the user's shell profile. The
prober therefore walks a fixed list of invocation strategies, some of them
with a widened PATH, until one exits cleanly with parseable JSON.

Every failure (spawn error, non-zero exit, bad output, optional timeout) is
logged and skipped. Running out of strategies is a normal result, not an
exception.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from packages.core.errors import ProbeError, ResponseParseError
from packages.shared.config import DEFAULT_EXTENDED_PATH
from .models import UsageInterval
from .parser import parse_blocks

log = logging.getLogger(__name__)

TOOL_ARGS: Tuple[str, ...] = ("blocks", "--json", "--active")

Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]

_NO_WINDOW = subprocess.CREATE_NO_WINDOW if hasattr(subprocess, "CREATE_NO_WINDOW") else 0


@dataclass(frozen=True)
class ProbeStrategy:
    program: str
    args: Tuple[str, ...]
    description: str

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


@dataclass(frozen=True)
class ProbeResult:
    interval: Optional[UsageInterval]
    tool_available: bool
    strategy: Optional[ProbeStrategy] = None


def with_extended_path(extended_path: str, command: str) -> str:
    """Prefix a shell command with a PATH assignment that keeps the inherited PATH last."""
    return f"PATH={extended_path}:$PATH {command}"


def default_strategies(extended_path: str = DEFAULT_EXTENDED_PATH) -> Tuple[ProbeStrategy, ...]:
    tool = " ".join(TOOL_ARGS)
    npx_cmd = f"npx ccusage@latest {tool}"
    global_cmd = f"ccusage {tool}"
    return (
        ProbeStrategy("sh", ("-c", with_extended_path(extended_path, npx_cmd)), "npx with extended PATH"),
        ProbeStrategy("sh", ("-c", with_extended_path(extended_path, global_cmd)), "global ccusage with extended PATH"),
        ProbeStrategy("sh", ("-c", npx_cmd), "npx via shell"),
        ProbeStrategy("sh", ("-c", global_cmd), "global ccusage via shell"),
        ProbeStrategy("npx", ("ccusage@latest", *TOOL_ARGS), "npx direct"),
        ProbeStrategy("ccusage", TOOL_ARGS, "ccusage direct"),
    )


class CommandProber:
    """Runs probe strategies in order and returns the first usable result."""

    def __init__(
        self,
        config: Optional[dict] = None,
        strategies: Optional[Sequence[ProbeStrategy]] = None,
        runner: Runner = subprocess.run,
    ) -> None:
        config = config or {}
        self._extended_path: str = config.get("extended_path", DEFAULT_EXTENDED_PATH)
        self._timeout: Optional[float] = config.get("command_timeout_seconds")
        self._strategies = tuple(strategies) if strategies is not None else default_strategies(self._extended_path)
        self._runner = runner

    @property
    def strategies(self) -> Tuple[ProbeStrategy, ...]:
        return self._strategies

    @property
    def extended_path(self) -> str:
        return self._extended_path

    def probe(self) -> ProbeResult:
        for strategy in self._strategies:
            try:
                interval = self._run_strategy(strategy)
            except ProbeError as e:
                log.warning("Probe strategy failed: %s", e)
                continue
            log.info("ccusage reachable via %s (active block: %s)",
                     strategy.description, interval.id if interval else "none")
            return ProbeResult(interval=interval, tool_available=True, strategy=strategy)

        log.error("All %d attempts to fetch session data failed", len(self._strategies))
        return ProbeResult(interval=None, tool_available=False)

    def _run_strategy(self, strategy: ProbeStrategy) -> Optional[UsageInterval]:
        try:
            result = self._runner(
                strategy.argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self._timeout,
                creationflags=_NO_WINDOW,
            )
        except subprocess.TimeoutExpired:
            raise ProbeError(strategy.description, "timeout", f"no exit after {self._timeout}s")
        except OSError as e:
            raise ProbeError(strategy.description, "spawn", str(e)) from e

        if result.returncode != 0:
            stderr = _tail(result.stderr)
            raise ProbeError(strategy.description, "exit", f"status {result.returncode}: {stderr}")

        try:
            return parse_blocks(result.stdout or b"")
        except ResponseParseError as e:
            log.debug("Unparseable output from %s: %r", strategy.description, _tail(result.stdout))
            raise ProbeError(strategy.description, "parse", str(e)) from e


def _tail(data: Optional[bytes], limit: int = 200) -> str:
    if not data:
        return ""
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else str(data)
    return text.strip()[-limit:]
