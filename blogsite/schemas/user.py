# blogsite/schemas/user.py
from typing import Optional

from pydantic import EmailStr, Field

from .base import BlogModel


class UserBase(BlogModel):
    username: str = Field(min_length=1)
    email: EmailStr
    full_name: Optional[str] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(min_length=1)


class UserPublic(UserBase):
    """What the API hands out: everything except the credential"""
    id: int
    is_admin: bool = False

    class Config:
        from_attributes = True


class User(UserPublic):
    password: str
