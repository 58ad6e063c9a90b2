"""
DoseMinder Test Suite
=====================

Test Structure:
- test_dosing/: Pure dose-schedule engine tests (fixed clock)
- test_services/: Service tests against an in-memory database
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_dosing/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"

# Common test data
SAMPLE_MEDICINES = [
    {"name": "Metformin", "dosage": "500mg", "times": ["08:00", "20:00"]},
    {"name": "Lisinopril", "dosage": "10mg", "times": ["08:00"]},
    {"name": "Ibuprofen", "dosage": "200mg", "times": []},
]

__all__ = [
    "TEST_DATABASE_URL",
    "SAMPLE_MEDICINES",
]
