from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import FrozenSet, Optional

from .casing import to_camel


class BaseRecord(BaseModel):
    """Shared configuration for rows mirrored from the store.

    Python attributes are snake_case like the table columns; JSON output uses
    camelCase aliases. Either spelling is accepted on input.
    """
    model_config = ConfigDict(
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def column_names(cls) -> FrozenSet[str]:
        """Table columns this record maps to."""
        return frozenset(cls.model_fields)
