"""
Tests for menu derivation from cache snapshots.
"""
from datetime import datetime, timezone

import pytest

from packages.core.usage.cache import CacheSnapshot
from packages.core.usage.parser import parse_blocks
from packages.core.usage.presentation import (
    INSTALL_URL,
    PROJECT_URL,
    ModelInfo,
    OpenLink,
    Quit,
    Refresh,
    ShowDebug,
    build_menu,
    format_cost,
    format_time_of_day,
    format_tokens_k,
    title_for,
)

FETCHED_AT = datetime(2025, 6, 20, 12, 0, tzinfo=timezone.utc)


def _local(hour, minute=0):
    return datetime(2025, 6, 20, hour, minute, tzinfo=timezone.utc).astimezone().strftime("%I:%M %p")


@pytest.fixture
def active_snapshot(block_factory, response_factory):
    def make(**overrides):
        interval = parse_blocks(response_factory(block_factory(**overrides)))
        return CacheSnapshot(interval=interval, last_updated=FETCHED_AT, tool_available=True)
    return make


def _footer_ok(model):
    items = model.items()
    assert [i.label for i in items[-3:]] == ["Refresh", "Debug Info", "Quit"]
    assert items[-3].action == Refresh()
    assert items[-2].action == ShowDebug()
    assert items[-1].action == Quit()


class TestBranches:
    """Test the four mutually exclusive layouts."""

    def test_loading(self):
        """Test a never-fetched snapshot renders only the loading line."""
        model = build_menu(CacheSnapshot())

        assert model.labels() == ("CCUsage", "Current session", "Loading...", "Refresh", "Debug Info", "Quit")
        loading = model.items()[2]
        assert loading.enabled is False
        _footer_ok(model)

    @pytest.mark.parametrize("tool_available", [True, False])
    def test_loading_wins_regardless_of_flags(self, tool_available, active_snapshot):
        """Test loading is chosen whenever last_updated is absent."""
        interval = active_snapshot().interval
        model = build_menu(CacheSnapshot(interval=interval, last_updated=None, tool_available=tool_available))

        assert "Loading..." in model.labels()
        assert not any(label.startswith("Cost:") for label in model.labels())

    def test_active(self, active_snapshot):
        model = build_menu(active_snapshot(cost=12.34))

        assert model.labels() == (
            "CCUsage",
            "Current session",
            "Cost: $12.34",
            "Tokens: In 1.2K / Out 5.7K",
            f"Started: {_local(10)}",
            f"Expires: {_local(15)}",
            "Models used",
            "Sonnet 4",
            "Refresh",
            "Debug Info",
            "Quit",
        )
        _footer_ok(model)

    def test_active_models_section(self, active_snapshot):
        """Test models are listed in order with normalized names and no-op actions."""
        model = build_menu(active_snapshot(models=["claude-3-haiku-20240307", "my-custom-opus-model", "gpt-x"]))

        models_section = model.sections[2]
        assert models_section[0].label == "Models used"
        assert models_section[0].enabled is False
        assert [i.label for i in models_section[1:]] == ["Haiku", "Opus", "gpt-x"]
        assert [i.action for i in models_section[1:]] == [
            ModelInfo("claude-3-haiku-20240307"),
            ModelInfo("my-custom-opus-model"),
            ModelInfo("gpt-x"),
        ]

    def test_active_without_models(self, active_snapshot):
        model = build_menu(active_snapshot(models=[]))

        assert "Models used" not in model.labels()
        _footer_ok(model)

    def test_active_bad_timestamps_degrade(self, active_snapshot):
        """Test unparseable timestamps render as Unknown instead of failing."""
        model = build_menu(active_snapshot(startTime="yesterday", endTime=""))

        assert "Started: Unknown" in model.labels()
        assert "Expires: Unknown" in model.labels()

    def test_tool_unavailable(self):
        """Test the install hint when the tool could not be reached."""
        model = build_menu(CacheSnapshot(interval=None, last_updated=FETCHED_AT, tool_available=False))

        assert model.labels() == (
            "CCUsage",
            "Current session",
            "No active session",
            "ccusage may not be installed",
            "Install: npm install -g ccusage",
            "Refresh",
            "Debug Info",
            "Quit",
        )
        items = model.items()
        assert items[3].enabled is False
        assert items[4].action == OpenLink(INSTALL_URL)

    def test_tool_available_nothing_active(self):
        """Test no install hint when the tool works but nothing is active."""
        model = build_menu(CacheSnapshot(interval=None, last_updated=FETCHED_AT, tool_available=True))

        assert model.labels() == (
            "CCUsage", "Current session", "No active session", "Refresh", "Debug Info", "Quit",
        )

    def test_header_links_project(self):
        model = build_menu(CacheSnapshot())

        assert model.items()[0].action == OpenLink(PROJECT_URL)

    def test_idempotent(self, active_snapshot):
        """Test building twice from the same snapshot gives equal models."""
        snap = active_snapshot()

        assert build_menu(snap) == build_menu(snap)


class TestFormatting:
    """Test the display helpers."""

    @pytest.mark.parametrize("cost,expected", [
        (12.34, "$12.34"),
        (12.345678, "$12.35"),
        (0, "$0.00"),
        (7.1, "$7.10"),
        (1234.5, "$1234.50"),
    ])
    def test_format_cost(self, cost, expected):
        assert format_cost(cost) == expected

    def test_cost_line_rounds(self, active_snapshot):
        model = build_menu(active_snapshot(cost=3.14159))

        assert "Cost: $3.14" in model.labels()

    @pytest.mark.parametrize("count,expected", [(0, "0.0K"), (999, "1.0K"), (1234, "1.2K"), (250000, "250.0K")])
    def test_format_tokens_k(self, count, expected):
        assert format_tokens_k(count) == expected

    def test_time_of_day_utc(self):
        assert format_time_of_day("2025-06-20T10:30:00.000Z") == _local(10, 30)

    def test_time_of_day_offset(self):
        assert format_time_of_day("2025-06-20T12:30:00+02:00") == _local(10, 30)

    @pytest.mark.parametrize("value", ["", "garbage", "2025-13-01T00:00:00Z", "2025-06-20T10:30:00"])
    def test_time_of_day_unknown(self, value):
        assert format_time_of_day(value) == "Unknown"

    def test_title(self, active_snapshot):
        assert title_for(active_snapshot(cost=12.34).interval) == "$12.34"
        assert title_for(None) == ""
