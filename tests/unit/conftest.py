"""
Shared fixtures for pipeline tests.
"""

import time
from typing import Callable

import pytest


@pytest.fixture
def wait_for() -> Callable[..., None]:
    """Poll a predicate until it holds or fail after a timeout."""

    def _wait(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
        deadline = time.monotonic() + timeout
        while not predicate():
            if time.monotonic() > deadline:
                pytest.fail("condition not reached before timeout")
            time.sleep(0.005)

    return _wait
