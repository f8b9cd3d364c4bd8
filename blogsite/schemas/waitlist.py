# blogsite/schemas/waitlist.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from .base import BlogModel


class WaitlistBase(BlogModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    blog_type: Optional[str] = None


class WaitlistCreate(WaitlistBase):
    pass


class Waitlist(WaitlistBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
