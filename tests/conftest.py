"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from chat_relay.services.huggingface_service import HuggingFaceService  # noqa: E402


def make_response(status_code: int = 200, text: str = "") -> MagicMock:
    """A stand-in for requests.Response with just what the service reads."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    resp.content = text.encode("utf-8")
    return resp


@pytest.fixture
def service():
    """HuggingFaceService with a fake key and endpoint; never touches the network."""
    return HuggingFaceService(
        api_key="hf_test_key",
        model_id="test-org/test-model",
        api_url="https://hf.test/models",
    )


@pytest.fixture
def mock_post():
    """Patch requests.post as seen by the service."""
    with patch("chat_relay.services.huggingface_service.requests.post") as post:
        yield post


@pytest.fixture
def sleeps():
    """Patch the backoff sleep; yields the list of requested delays."""
    delays = []
    with patch("chat_relay.utils.retry.time") as fake_time:
        fake_time.sleep.side_effect = delays.append
        yield delays
