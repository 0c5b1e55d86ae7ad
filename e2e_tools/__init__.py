"""
================================================================================
E2E Tools
================================================================================

Infrastructure shared by the test suites.

Modules:
    - common: Shared configuration and logging utilities
    - report_tools: Allure step reporting (steps, screenshots, videos)

Example:
    from e2e_tools.common import get_config, init_logger
    from e2e_tools.report_tools import StepReporter

    init_logger()
    reporter = StepReporter.from_config()
    with reporter.step("Open the landing page"):
        ...

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
]
