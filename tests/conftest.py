"""Pytest configuration and fixtures for tablestakes tests."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Generator

import pytest
import structlog

from tablestakes import Table
from tablestakes.infrastructure.config import get_config


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def fresh_config() -> Generator[None, None, None]:
    """Drop the cached configuration around each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture(autouse=True)
def fresh_logging() -> Generator[None, None, None]:
    """Restore the default structlog configuration after each test."""
    yield
    structlog.reset_defaults()
    logging.getLogger("tablestakes").setLevel(logging.NOTSET)


@pytest.fixture
def people() -> Table:
    """Three people across two states."""
    return Table([["Name", "State"], ["John", "NY"], ["Amy", "NY"], ["Lee", "TX"]])


@pytest.fixture
def contacts() -> Table:
    """Contacts with repeated addresses and numeric record counts."""
    return Table(
        [
            ["Name", "Address", "Phone", "Records"],
            ["John", "123 Main", "098-765-4321", "3"],
            ["Sharon", "123 Main", "098-765-4321", "3"],
            ["Jerry", "212 Vine", "123-456-7890", "1"],
        ]
    )


@pytest.fixture
def cities() -> Table:
    """Cities with state and population."""
    return Table(
        [
            ["City", "State", "Population"],
            ["New York", "NY", "8336817"],
            ["Albany", "NY", "99224"],
            ["Dallas", "TX", "1304379"],
            ["Austin", "TX", "961855"],
            ["Newark", "NJ", "311549"],
        ]
    )


@pytest.fixture
def capitals() -> Table:
    """State capitals."""
    return Table(
        [
            ["Capital", "State"],
            ["Albany", "NY"],
            ["Austin", "TX"],
            ["Trenton", "NJ"],
        ]
    )


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
