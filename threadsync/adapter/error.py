"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class FeedError(AdapterError):
    """Comment feed request failed or returned GraphQL errors."""

    pass


class EventParseError(AdapterError):
    """Push event payload could not be parsed."""

    pass
