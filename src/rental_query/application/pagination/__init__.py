"""Application pagination – page descriptors and cursor helpers."""
from rental_query.application.pagination.page import (
    PAGE_PARAM,
    PaginatedResult,
    PaginationDescriptor,
    page_from_cursor,
    total_pages,
)

__all__ = [
    "PAGE_PARAM",
    "PaginatedResult",
    "PaginationDescriptor",
    "page_from_cursor",
    "total_pages",
]
