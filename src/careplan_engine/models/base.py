"""Shared pydantic base for wire-facing models.

The HTTP contract is camelCase while Python code stays snake_case;
``populate_by_name`` lets the engine construct models with field names
and lets stored blobs written by either spelling parse.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StrictWireModel(WireModel):
    """Wire model that rejects unknown keys (assessment details)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid",
    )
