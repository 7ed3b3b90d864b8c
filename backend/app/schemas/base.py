# backend/app/schemas/base.py
"""
Shared building blocks for API schemas.

The frontend speaks camelCase JSON while the Python side stays snake_case:
`CamelModel` generates camelCase aliases, accepts either spelling on input
and serializes with the aliases (FastAPI uses `by_alias` for responses).

Money values are `Decimal` internally and plain JSON numbers on the wire.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# YNAB ids are UUIDs; only the shape is checked, not the version bits
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

# Decimal that is emitted as a JSON number instead of a string
JsonDecimal = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
