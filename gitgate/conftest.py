"""Pytest adapter for the self-running test suite in test_gitgate.py."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent / 'lib'))
sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture
def runner():
    """A TestRunner whose failed assertions fail the pytest test."""
    from test_gitgate import TestRunner

    test_runner = TestRunner()
    yield test_runner
    assert test_runner.failed == 0, "\n".join(test_runner.errors)
