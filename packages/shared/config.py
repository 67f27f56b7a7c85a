from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

# Common install locations for node/npm, including version-manager directories.
# The shell expands $HOME and the nvm wildcard at run time.
DEFAULT_EXTENDED_PATH = (
    "/usr/local/bin:/opt/homebrew/bin:/usr/bin:/bin"
    ":$HOME/.npm/bin:$HOME/.nvm/versions/node/*/bin:$HOME/.volta/bin"
)


class AppConfig(BaseModel):
    refresh_interval_seconds: int = Field(default=120, ge=1)
    # None keeps the historical behaviour: a hung tool stalls its strategy.
    command_timeout_seconds: Optional[float] = Field(default=None, gt=0)
    extended_path: str = DEFAULT_EXTENDED_PATH
    show_debug_dialog: bool = True

    def to_coordinator_config(self) -> dict:
        return {
            "refresh_interval_seconds": self.refresh_interval_seconds,
        }

    def to_prober_config(self) -> dict:
        return {
            "extended_path": self.extended_path,
            "command_timeout_seconds": self.command_timeout_seconds,
        }
