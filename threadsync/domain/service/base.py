"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services contain logic that doesn't naturally belong to a
    single entity, such as keeping a whole comment forest consistent.
    """

    pass
