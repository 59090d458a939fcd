"""Shared test fixtures for the notionpost test suite."""

from __future__ import annotations

import pytest

from notionpost.config import NotionPostConfig


@pytest.fixture
def config() -> NotionPostConfig:
    """Default test configuration with dummy credentials."""
    return NotionPostConfig(token="test-token-1234", database_id="db-1")
