"""
Named failures raised across the storage boundary.

Both backends translate whatever their store reports into these classes
so callers can branch on the type instead of parsing messages.  A lookup
that finds nothing is not an error: it returns ``None``.
"""

from typing import Any, Optional


class StorageError(Exception):
    """Base class for every storage failure."""


class ConflictError(StorageError):
    """A uniqueness constraint would be violated."""

    field = "value"

    def __init__(self, message: Optional[str] = None, value: Any = None):
        self.value = value
        super().__init__(message or f"{self.field} is already taken")


class DuplicateUsernameError(ConflictError):
    field = "username"

    def __init__(self, value: Any = None):
        super().__init__("Username is already taken", value)


class DuplicateEmailError(ConflictError):
    field = "email"

    def __init__(self, value: Any = None):
        super().__init__("Email is already registered", value)


class DuplicateWaitlistEmailError(ConflictError):
    field = "email"

    def __init__(self, value: Any = None):
        super().__init__("Email is already on the waitlist", value)


class DuplicateSlugError(ConflictError):
    field = "slug"

    def __init__(self, entity: str, value: Any = None):
        self.entity = entity
        super().__init__(f"A {entity} with slug '{value}' already exists", value)


class DuplicatePostTagError(ConflictError):
    field = "post_tag"

    def __init__(self, post_id: int, tag_id: int):
        self.post_id = post_id
        self.tag_id = tag_id
        super().__init__(f"Tag {tag_id} is already attached to post {post_id}", (post_id, tag_id))


class ReferenceViolationError(StorageError):
    """A referenced row (author, category, post, tag) does not exist."""

    def __init__(self, entity: str, key: Any = None):
        self.entity = entity
        self.key = key
        super().__init__(f"Referenced {entity} {key} does not exist")


class NotFoundError(StorageError):
    """Raised by mutations that target a row which does not exist."""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity.capitalize()} with ID {key} not found")


class StorageUnavailableError(StorageError):
    """The backing store could not complete the operation; safe to retry."""
