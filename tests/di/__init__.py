"""Mock providers for testing."""

from .feed import MockFeedProvider
from .container import build_test_container

__all__ = [
    "MockFeedProvider",
    "build_test_container",
]
