from __future__ import annotations

from typing import Literal

ProbeFailure = Literal["spawn", "exit", "parse", "timeout"]


class UsageTrayError(Exception):
    """Base class for errors raised by the usage pipeline."""


class ResponseParseError(UsageTrayError):
    """The tool's output did not match the expected blocks envelope."""


class ProbeError(UsageTrayError):
    """One probe strategy failed. Recovered by moving to the next strategy."""

    def __init__(self, strategy: str, reason: ProbeFailure, detail: str = "") -> None:
        self.strategy = strategy
        self.reason = reason
        self.detail = detail
        msg = f"{strategy}: {reason}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
