import os
import sys

import pytest

# Add the websocket directory and the shared lambda layer to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "websocket"))
sys.path.insert(
    0, os.path.join(os.path.dirname(__file__), "..", "..", "..", "shared", "lambda_layers")
)
sys.path.insert(0, os.path.dirname(__file__))

from fakes import InMemoryRegistry, InMemoryStore, RecordingPushChannel  # noqa: E402
from relay_utils.config import RelayConfig  # noqa: E402
from relay_utils.context import RelayContext  # noqa: E402


@pytest.fixture
def registry():
    return InMemoryRegistry()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def channel():
    return RecordingPushChannel()


@pytest.fixture
def relay(registry, store, channel):
    """RelayContext wired to in-memory fakes with the clock fixed at T=1000s."""
    return RelayContext(
        config=RelayConfig(bucket_name=store.bucket),
        registry=registry,
        store=store,
        channel=channel,
        clock=lambda: 1000.0,
    )
