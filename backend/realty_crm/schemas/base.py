"""
Shared base for partial-update schemas
"""
from typing import ClassVar, FrozenSet

from pydantic import BaseModel, model_validator


class UpdateSchema(BaseModel):
    """
    Partial update: omitted fields are left alone.

    Fields named in ``not_nullable`` back NOT NULL columns, so an explicit
    ``null`` for them is rejected instead of being written.
    """
    not_nullable: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = sorted(
            name for name in self.model_fields_set
            if name in self.not_nullable and getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self
