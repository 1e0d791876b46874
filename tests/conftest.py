"""Shared fixtures for the image generation test suite."""

import pytest

from helpers import make_png
from utils.errors import RequestFailed


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def failing_request() -> RequestFailed:
    return RequestFailed(attempts=5, last_error="API call failed with status 503: overloaded", status_code=503)
