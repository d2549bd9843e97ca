"""
Client-side search, filtering and pagination over a full collection snapshot.

The store never filters or paginates; every management screen loads the
whole collection and derives the visible page here.
"""

import math
from typing import Any, Dict, Generic, List, Mapping, Sequence, Tuple, TypeVar, Union

from dashboard.listing.schemas import ELLIPSIS, PageView
from dashboard.store.base import EVENTS, REPORTS, USERS

T = TypeVar("T")

ALL = "all"

# Fields a free-text query is matched against, per collection
SEARCH_FIELDS: Dict[str, Tuple[str, ...]] = {
    EVENTS: ("title", "description", "location"),
    REPORTS: ("reason", "description", "event_title", "reporter_name"),
    USERS: ("name", "email"),
}

# Field the category dropdown filters on, per collection
CATEGORY_FIELDS: Dict[str, str] = {
    EVENTS: "type",
    REPORTS: "status",
    USERS: "status",
}

# Distance from the current page within which page numbers stay visible
WINDOW_RADIUS = 2


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _field(item: Any, name: str) -> Any:
    # Raw store documents use the camelCase keys, models the snake_case attributes
    if isinstance(item, Mapping):
        value = item.get(name)
        return value if value is not None else item.get(_camel(name))
    return getattr(item, name, None)


def _text(value: Any) -> str:
    # str-valued enums compare by value
    return str(getattr(value, "value", value)).lower()


def matches_query(item: Any, query: str, fields: Sequence[str]) -> bool:
    """True if ``query`` is a case-insensitive substring of any searchable field."""
    if not query:
        return True
    needle = query.lower()
    for name in fields:
        value = _field(item, name)
        if value is not None and needle in _text(value):
            return True
    return False


def matches_category(item: Any, category: str, field: str) -> bool:
    if not category or category == ALL:
        return True
    value = _field(item, field)
    return value is not None and _text(value) == category.lower()


def is_admin(item: Any) -> bool:
    return _field(item, "role") == "admin"


def filter_items(items: Sequence[T], query: str, category: str, collection: str) -> List[T]:
    """Apply the fixed predicates, then the text query, then the category filter."""
    if collection == USERS:
        items = [i for i in items if not is_admin(i)]
    fields = SEARCH_FIELDS[collection]
    category_field = CATEGORY_FIELDS[collection]
    return [
        i for i in items
        if matches_query(i, query, fields) and matches_category(i, category, category_field)
    ]


def page_count(filtered_count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")
    return math.ceil(filtered_count / page_size)


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def page_window(current_page: int, total_pages: int) -> List[Union[int, str]]:
    """Compact pagination controls: first, last and neighbours of the current page.

    Every run of hidden pages collapses into a single ELLIPSIS marker, so
    ``page_window(5, 10)`` gives ``[1, "...", 3, 4, 5, 6, 7, "...", 10]``.
    """
    window: List[Union[int, str]] = []
    for page in range(1, total_pages + 1):
        if page == 1 or page == total_pages or abs(page - current_page) <= WINDOW_RADIUS:
            window.append(page)
        elif not window or window[-1] != ELLIPSIS:
            window.append(ELLIPSIS)
    return window


class ListController(Generic[T]):
    """Holds the query, category filter and current page of one screen."""

    def __init__(self, items: Sequence[T], collection: str, page_size: int,
                 query: str = "", category_filter: str = ALL):
        if collection not in SEARCH_FIELDS:
            raise ValueError(f"Unknown collection: {collection}")
        if page_size < 1:
            raise ValueError("page_size must be a positive integer")
        self.collection = collection
        self.page_size = page_size
        self._items = list(items)
        self._query = query or ""
        self._category = category_filter or ALL
        self.current_page = 1
        self._refilter()

    def _refilter(self) -> None:
        self._filtered = filter_items(self._items, self._query, self._category, self.collection)
        self.current_page = 1

    # ────────────────────────────────
    # Inputs
    # ────────────────────────────────
    @property
    def query(self) -> str:
        return self._query

    @property
    def category_filter(self) -> str:
        return self._category

    def set_query(self, query: str) -> None:
        self._query = query or ""
        self._refilter()

    def set_category_filter(self, category: str) -> None:
        self._category = category or ALL
        self._refilter()

    def replace_items(self, items: Sequence[T]) -> None:
        """Swap in a patched snapshot of the collection."""
        self._items = list(items)
        self._refilter()

    # ────────────────────────────────
    # Navigation
    # ────────────────────────────────
    def go_to_page(self, page: int) -> None:
        # No clamping: callers only offer pages from the window
        if page < 1:
            raise ValueError("page must be a positive integer")
        self.current_page = page

    def next_page(self) -> None:
        if self.current_page < self.page_count:
            self.current_page += 1

    def prev_page(self) -> None:
        if self.current_page > 1:
            self.current_page -= 1

    # ────────────────────────────────
    # Derived view
    # ────────────────────────────────
    @property
    def filtered_items(self) -> List[T]:
        return list(self._filtered)

    @property
    def filtered_count(self) -> int:
        return len(self._filtered)

    @property
    def page_count(self) -> int:
        return page_count(self.filtered_count, self.page_size)

    @property
    def visible_items(self) -> List[T]:
        return paginate(self._filtered, self.current_page, self.page_size)

    @property
    def window(self) -> List[Union[int, str]]:
        return page_window(self.current_page, self.page_count)

    def view(self) -> PageView:
        visible = self.visible_items
        start = (self.current_page - 1) * self.page_size + 1 if visible else 0
        return PageView(
            items=visible,
            filtered_count=self.filtered_count,
            page=self.current_page,
            page_size=self.page_size,
            page_count=self.page_count,
            window=self.window,
            start_index=start,
            end_index=start + len(visible) - 1 if visible else 0,
        )
