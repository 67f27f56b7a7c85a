"""
Menu model derived from a cache snapshot.

`build_menu` is a pure function: same snapshot in, equal model out. The tray
host turns the model into native widgets and dispatches the item actions.

Branches, in priority order:
    loading         - no refresh has completed yet
    active          - an active block is cached
    tool missing    - fetched, nothing active, ccusage could not be reached
    idle            - fetched, nothing active, ccusage works
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

from .cache import CacheSnapshot
from .models import UsageInterval
from .parser import format_model_name

PROJECT_URL = "https://github.com/ryoppippi/ccusage"
INSTALL_URL = "https://github.com/ryoppippi/ccusage#installation"
UNKNOWN_TIME = "Unknown"


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class ShowDebug:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class OpenLink:
    url: str


@dataclass(frozen=True)
class ModelInfo:
    model: str


MenuAction = Union[Refresh, ShowDebug, Quit, OpenLink, ModelInfo]


@dataclass(frozen=True)
class MenuItem:
    label: str
    action: Optional[MenuAction] = None
    enabled: bool = True


MenuSection = Tuple[MenuItem, ...]


@dataclass(frozen=True)
class PresentationModel:
    sections: Tuple[MenuSection, ...]

    def items(self) -> Tuple[MenuItem, ...]:
        return tuple(item for section in self.sections for item in section)

    def labels(self) -> Tuple[str, ...]:
        return tuple(item.label for item in self.items())


def format_cost(cost: float) -> str:
    return f"${cost:.2f}"


def format_tokens_k(count: int) -> str:
    return f"{count / 1000:.1f}K"


def format_time_of_day(timestamp: str) -> str:
    """Local 12-hour time for an RFC 3339 timestamp, or "Unknown"."""
    try:
        # fromisoformat only accepts a trailing "Z" from 3.11 on
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return UNKNOWN_TIME
    if parsed.tzinfo is None:
        return UNKNOWN_TIME
    return parsed.astimezone().strftime("%I:%M %p")


def title_for(interval: Optional[UsageInterval]) -> str:
    return format_cost(interval.cost_usd) if interval is not None else ""


def _active_sections(interval: UsageInterval) -> Tuple[MenuSection, ...]:
    counts = interval.token_counts
    session: MenuSection = (
        MenuItem("Current session", enabled=False),
        MenuItem(f"Cost: {format_cost(interval.cost_usd)}"),
        MenuItem(f"Tokens: In {format_tokens_k(counts.input_tokens)} / Out {format_tokens_k(counts.output_tokens)}"),
        MenuItem(f"Started: {format_time_of_day(interval.start_time)}"),
        MenuItem(f"Expires: {format_time_of_day(interval.end_time)}"),
    )
    if not interval.models:
        return (session,)

    models: MenuSection = (MenuItem("Models used", enabled=False),) + tuple(
        MenuItem(format_model_name(model), action=ModelInfo(model)) for model in interval.models
    )
    return (session, models)


def build_menu(snapshot: CacheSnapshot) -> PresentationModel:
    header: MenuSection = (MenuItem("CCUsage", action=OpenLink(PROJECT_URL)),)
    title = MenuItem("Current session", enabled=False)

    if not snapshot.has_fetched:
        body: Tuple[MenuSection, ...] = ((title, MenuItem("Loading...", enabled=False)),)
    elif snapshot.interval is not None:
        body = _active_sections(snapshot.interval)
    elif not snapshot.tool_available:
        body = ((
            title,
            MenuItem("No active session"),
            MenuItem("ccusage may not be installed", enabled=False),
            MenuItem("Install: npm install -g ccusage", action=OpenLink(INSTALL_URL)),
        ),)
    else:
        body = ((title, MenuItem("No active session")),)

    footer: Tuple[MenuSection, ...] = (
        (MenuItem("Refresh", action=Refresh()), MenuItem("Debug Info", action=ShowDebug())),
        (MenuItem("Quit", action=Quit()),),
    )
    return PresentationModel(sections=(header,) + body + footer)
