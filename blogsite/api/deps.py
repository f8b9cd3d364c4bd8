# blogsite/api/deps.py

from typing import Optional

from fastapi import Query, Request

from blogsite.storage import BlogStorage


def get_storage(request: Request) -> BlogStorage:
    return request.app.state.storage


class Pagination:
    """``?limit=&offset=`` query parameters shared by the post listings"""

    def __init__(
        self,
        limit: Optional[int] = Query(None, ge=0),
        offset: int = Query(0, ge=0),
    ):
        self.limit = limit
        self.offset = offset
