"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and keeps browser tests opt-in.

Browser tests are marked ``e2e`` and only run when ``E2E=true`` (or
``e2e.enabled: true`` in config.yaml); everything else runs offline.

================================================================================
"""

import pytest

from e2e_tools.common import get_config


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests driving a real browser"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "unit: Offline framework tests"
    )


def pytest_collection_modifyitems(config, items):
    """
    Add directory markers and skip browser tests unless enabled.
    """
    run_e2e = bool(get_config("e2e.enabled", False))
    skip_e2e = pytest.mark.skip(reason="browser tests disabled (set E2E=true to run)")

    for item in items:
        # Auto-add 'ui' marker to tests in ui_testing directory
        if "ui_testing" in str(item.fspath):
            item.add_marker(pytest.mark.ui)

        # Auto-add 'unit' marker to tests in unit directory
        if item.fspath.dirpath().basename == "unit":
            item.add_marker(pytest.mark.unit)

        if "e2e" in item.keywords and not run_e2e:
            item.add_marker(skip_e2e)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "E2E Page Object Framework",
        f"Base URL: {get_config('ui.base_url')}",
        f"Browser tests: {'enabled' if get_config('e2e.enabled', False) else 'disabled'}",
        "=" * 60,
        "",
    ]
