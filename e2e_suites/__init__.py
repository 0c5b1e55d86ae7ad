"""
Test suites package.

This repository intentionally keeps `e2e_suites` importable to support:
  - IDE navigation
  - page objects and fakes shared between test directories
  - CI/CD module imports
"""
