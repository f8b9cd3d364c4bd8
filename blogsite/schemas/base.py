# blogsite/schemas/base.py

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, field_validator


class BlogModel(BaseModel):
    """Common base: datetimes are always timezone-aware UTC.

    SQLite hands back naive datetimes, so anything without tzinfo is
    taken to be UTC already.
    """

    @field_validator("*", mode="after")
    @classmethod
    def ensure_utc(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            if v.tzinfo is None:
                return v.replace(tzinfo=timezone.utc)
            return v.astimezone(timezone.utc)
        return v
