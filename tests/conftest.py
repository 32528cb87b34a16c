"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Restores the process-wide fixture generator and environment after each test.
"""

import os
import signal
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
from pathlib import Path

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

_TEST_TIMEOUT = int(os.environ.get("PYTEST_TEST_TIMEOUT", "10"))


def _timeout_handler(signum, frame):
    """Test Timeout handler."""
    raise TimeoutError(f"Test exceeded {_TEST_TIMEOUT} seconds timeout")


def pytest_runtest_setup(item):
    """Test Pytest runtest setup."""
    try:
        signal.signal(signal.SIGALRM, _timeout_handler)
        signal.alarm(_TEST_TIMEOUT)
    except (AttributeError, ValueError):
        pass


def pytest_runtest_teardown(item, nextitem):
    """Test Pytest runtest teardown."""
    try:
        signal.alarm(0)
    except (AttributeError, ValueError):
        pass


@pytest.fixture(autouse=True)
def _isolate_process_defaults():
    """Reset the default generator and environment around every test."""
    from blot.env import use_environment
    from blot.pipeline.interpolation import reset_default_generator

    reset_default_generator()
    use_environment(None)
    yield
    reset_default_generator()
    use_environment(None)


class FakeLoader:
    """In-memory include loader keyed by target name."""

    def __init__(self, documents):
        self.documents = dict(documents)
        self.calls = []

    async def load(self, target, base=None):
        self.calls.append((target, base))
        if target not in self.documents:
            from blot.exceptions import TransclusionError

            raise TransclusionError(f"Failed to transclude {target}")
        return self.documents[target], target


class FixedGenerator:
    """Generator that replaces the literal token ``|~value|`` with ``value``."""

    def __init__(self, value="42"):
        self.value = value
        self.calls = 0

    def process(self, text):
        self.calls += 1
        return text.replace("|~value|", self.value)


@pytest.fixture
def fake_loader():
    """Return the FakeLoader class for building in-memory include trees."""
    return FakeLoader


@pytest.fixture
def fixed_generator():
    """Return a deterministic generator."""
    return FixedGenerator()
