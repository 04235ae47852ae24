"""
CareTimeline Test Suite
=======================

This package contains all tests for the CareTimeline day timeline and adherence engine.

Test Structure:
- test_tools/: Engine unit tests (windows, statuses, timeline, completion, adherence, trends, reports)
- test_services/: Service tests against an in-memory SQLite store
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_tools/

    # Run with verbose output
    pytest -v

    # Run only marked tests
    pytest -m "api"
"""
