"""Infrastructure providers."""

# Import bases
from .feed import FeedProvider

# Import implementations (needed for __subclasses__())
from .feed import ProdFeedProvider  # noqa: F401

__all__ = [
    "FeedProvider",
    "ProdFeedProvider",
]
