"""Dependency injection module."""

from typing import Type

from dishka import AsyncContainer, make_async_container

from threadsync.util.di.application import ProdApplicationProvider
from threadsync.util.di.base import Component, ProviderBase
from threadsync.util.di.core import ProdConfigProvider
from threadsync.util.di.domain import ProdDomainProvider
from threadsync.util.di.infrastructure import FeedProvider, ProdFeedProvider
from threadsync.util.error import DependencyInjectionError

# Single list - all providers treated uniformly
PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Infrastructure components (mockable)
    FeedProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Get appropriate provider class.

    Automatically determines if provider is mockable by checking for subclasses.

    - No subclasses: Concrete provider, use directly
    - Has subclasses: Mockable component, select by __is_mock__ flag

    Args:
        base: Provider base class
        use_mock: Whether to use mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        DependencyInjectionError: If requested implementation not found
    """
    subclasses = base.__subclasses__()

    if not subclasses:
        # Concrete provider - no implementations, use as-is
        return base

    # Has subclasses - it's a mockable component
    # Find implementation by __is_mock__ flag
    impl = next(
        (c for c in subclasses if getattr(c, "__is_mock__", False) == use_mock),
        None,
    )

    if not impl:
        component_name = getattr(base, "__mock_component__", base.__name__)
        raise DependencyInjectionError(component_name, use_mock)

    return impl


def build_container() -> AsyncContainer:
    """Build the production container.

    Open one request scope per thread view:

        container = build_container()
        async with container() as view:
            seed = await view.get(SeedThreadUseCase)
            await seed.execute(SeedThreadRequest(post_id="p1"))
    """
    return make_async_container(*(get_provider(base)() for base in PROVIDERS))


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "build_container",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    # Infrastructure base classes
    "FeedProvider",
    # Infrastructure implementations
    "ProdFeedProvider",
]
