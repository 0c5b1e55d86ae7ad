"""
Allure reporting helpers for UI tests.
"""

from .allure_utils import StepReporter, StepStatus, reporting_enabled

__all__ = [
    "StepReporter",
    "StepStatus",
    "reporting_enabled",
]
