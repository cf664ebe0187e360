"""Errors raised while wiring the application together."""


class UtilError(Exception):
    """Base error for settings and container setup."""

    pass


class ConfigurationError(UtilError):
    """A setting is missing or unusable."""

    def __init__(self, setting: str, message: str) -> None:
        """Initialize configuration error.

        Args:
            setting: Dotted settings path, e.g. ``feed.graphql_url``
            message: What is wrong with it
        """
        self.setting = setting
        super().__init__(f"{setting}: {message}")


class DependencyInjectionError(UtilError):
    """No provider implementation matches a component."""

    def __init__(self, component: str, use_mock: bool) -> None:
        self.component = component
        self.use_mock = use_mock
        kind = "mock" if use_mock else "production"
        super().__init__(f"No {kind} implementation for {component}")
