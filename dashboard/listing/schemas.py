from pydantic import BaseModel
from typing import Generic, List, TypeVar, Union

T = TypeVar("T")

ELLIPSIS = "..."


class PageView(BaseModel, Generic[T]):
    """One visible page of a filtered collection."""
    items: List[T]
    filtered_count: int
    page: int
    page_size: int
    page_count: int
    window: List[Union[int, str]]  # page numbers and ELLIPSIS markers
    start_index: int  # 1-based, 0 when nothing matched
    end_index: int
