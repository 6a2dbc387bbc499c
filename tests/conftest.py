"""Pytest configuration for inputforge."""
import pytest

from inputforge.base.config import set_config


@pytest.fixture(autouse=True)
def reset_global_config():
    # Every test sees a config freshly loaded from its own environment.
    set_config(None)
    yield
    set_config(None)


class RecordingSink:
    def __init__(self):
        self.reports = []

    def report(self, message, payload):
        self.reports.append((message, payload))


@pytest.fixture
def sink():
    return RecordingSink()
