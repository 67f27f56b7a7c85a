"""
Shared fixtures for usage pipeline tests.
"""
import json
import subprocess

import pytest


def make_block(block_id="block-1", active=True, cost=12.34, models=None, **overrides):
    block = {
        "id": block_id,
        "startTime": "2025-06-20T10:00:00.000Z",
        "endTime": "2025-06-20T15:00:00.000Z",
        "isActive": active,
        "tokenCounts": {
            "inputTokens": 1234,
            "outputTokens": 5678,
            "cacheCreationInputTokens": 100,
            "cacheReadInputTokens": 200,
        },
        "costUSD": cost,
        "models": ["claude-sonnet-4-20250514"] if models is None else models,
    }
    block.update(overrides)
    return block


def blocks_json(*blocks) -> bytes:
    return json.dumps({"blocks": list(blocks)}).encode("utf-8")


def completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(args=["sh"], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def block_factory():
    return make_block


@pytest.fixture
def response_factory():
    return blocks_json


@pytest.fixture
def completed_factory():
    return completed
