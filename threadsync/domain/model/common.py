"""Base model for comment tree entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for nodes, pages and snapshots.

    Instances are never changed in place. Updates go through
    ``model_copy``, so unchanged subtrees keep their identity and a
    snapshot handed to the renderer cannot drift.
    """

    model_config = ConfigDict(frozen=True)
