from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 5


def clamp_page(page: int, page_size: int) -> Tuple[int, int]:
    return max(1, page), min(max(1, page_size), MAX_PAGE_SIZE)


def paginate(items: Sequence[T], page: int, page_size: int) -> Tuple[List[T], int, bool]:
    """Slice one page out of ``items``; returns (page items, total, has_more)."""
    page, page_size = clamp_page(page, page_size)
    total = len(items)
    start = (page - 1) * page_size
    end = start + page_size
    return list(items[start:end]), total, end < total


def search_matches(query: Optional[str], *fields: Optional[str]) -> bool:
    """Case-insensitive substring match against any of ``fields``."""
    if not query:
        return True
    needle = query.lower()
    return any(needle in (field or "").lower() for field in fields)
