"""Root pytest configuration for test discovery and auto-skip behavior.

Test Structure:
    tests/
    ├── flag_config/           # Settings loading
    ├── flag_store/            # Document repository (in-memory SQLite)
    │   └── integration/       # Tests with Testcontainers PostgreSQL
    ├── flag_identity/         # Validation, services, HTTP boundary
    │   ├── unit/              # Fast, isolated tests (mocks and fakes)
    │   └── integration/       # Service against a real store
    └── shared/                # Shared fixtures and utilities

Environment Variables:
    RUN_INTEGRATION=1    Run @pytest.mark.integration tests
    RUN_ALL_TESTS=1      Run all tests (overrides other settings)

Pytest Options:
    --run-integration    Run integration tests
    --run-all            Run all tests
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from flag_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.test for tests when present
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.test").exists():
    load_dotenv(CONFIG_DIR / ".env.test")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.integration",
    )
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Run all tests regardless of markers",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: Tests that need a PostgreSQL container (auto-skipped)",
    )


def _flag_enabled(config, option: str, env_var: str) -> bool:
    return config.getoption(option) or os.environ.get(env_var, "").lower() in (
        "1",
        "true",
        "yes",
    )


def pytest_collection_modifyitems(config, items):
    """Auto-skip integration tests unless explicitly enabled."""
    if _flag_enabled(config, "--run-all", "RUN_ALL_TESTS"):
        return

    if _flag_enabled(config, "--run-integration", "RUN_INTEGRATION"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test - run with --run-integration or RUN_INTEGRATION=1",
    )
    for item in items:
        item_markers = {mark.name for mark in item.iter_markers()}
        if "integration" in item_markers:
            item.add_marker(skip_integration)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Make every test read settings from its own environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()
