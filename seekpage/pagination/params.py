"""Query parameters and Link headers for paginated HTTP endpoints."""

from typing import Any, Dict, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, Field

from .order import Direction


class PaginationParams(BaseModel):
    """Query parameters for keyset pagination."""

    per_page: int = Field(default=20, ge=1, le=200, description="Number of items per page")
    cursor: Optional[str] = Field(default=None, description="Cursor from a previous page")
    direction: Direction = Field(default=Direction.FORWARD, description="Direction of travel from the cursor")
    order: Optional[str] = Field(
        default=None,
        pattern=r"^[A-Za-z0-9_:,+\- ]+$",
        description="Sort string such as '-created_at,id'"
    )


def create_link_header(
    base_url: str,
    params: Dict[str, Any],
    next_cursor: Optional[str] = None,
    prev_cursor: Optional[str] = None
) -> Optional[str]:
    """Create Link header for pagination as per RFC 8288.

    Args:
        base_url: Base URL for the resource
        params: Current query parameters (cursor and direction are replaced)
        next_cursor: Last cursor of the current page, if a next page exists
        prev_cursor: First cursor of the current page, if a previous page exists

    Returns:
        Link header value or None if no links
    """
    base_params = {
        k: v.value if isinstance(v, Direction) else v
        for k, v in params.items()
        if k not in ("cursor", "direction") and v is not None
    }
    links = []

    if next_cursor:
        next_params = {**base_params, "cursor": next_cursor, "direction": Direction.FORWARD.value}
        links.append(f'<{base_url}?{urlencode(next_params)}>; rel="next"')

    if prev_cursor:
        prev_params = {**base_params, "cursor": prev_cursor, "direction": Direction.BACKWARD.value}
        links.append(f'<{base_url}?{urlencode(prev_params)}>; rel="prev"')

    return ", ".join(links) if links else None
