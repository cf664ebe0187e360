"""In-flight request bookkeeping.

"Load more" requests for the same target must not overlap: two concurrent
pages fetched with the same cursor would be appended twice or out of order.
"""

from collections.abc import Iterator
from contextlib import contextmanager


class InFlightRegistry:
    """Set of targets with a pagination request in flight."""

    def __init__(self) -> None:
        self._keys: set[str] = set()

    def is_busy(self, key: str) -> bool:
        """Whether a request for the key is in flight."""
        return key in self._keys

    @contextmanager
    def claim(self, key: str) -> Iterator[bool]:
        """Claim the key for the duration of the block.

        Yields:
            True if the claim succeeded, False if the key was already busy
        """
        if key in self._keys:
            yield False
            return
        self._keys.add(key)
        try:
            yield True
        finally:
            self._keys.discard(key)
