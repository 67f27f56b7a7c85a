"""
Wire and domain models for the usage tool's `blocks --json` output.

A "block" is one billing window. The tool emits `{"blocks": [...]}` with
camelCase field names; the models accept those names and expose snake_case
attributes. Instances are frozen once validated.
"""

from __future__ import annotations

from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class TokenCounts(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    input_tokens: int = Field(alias="inputTokens", ge=0)
    output_tokens: int = Field(alias="outputTokens", ge=0)
    cache_creation_input_tokens: int = Field(alias="cacheCreationInputTokens", ge=0)
    cache_read_input_tokens: int = Field(alias="cacheReadInputTokens", ge=0)


class UsageInterval(BaseModel):
    """One usage window as reported by the tool."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    # Kept as text; presentation degrades unparseable values to "Unknown"
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    is_active: bool = Field(alias="isActive")
    token_counts: TokenCounts = Field(alias="tokenCounts")
    cost_usd: float = Field(alias="costUSD", ge=0)
    models: Tuple[str, ...] = ()


class BlocksResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    blocks: List[UsageInterval]
