"""Schema for one page of a paginated list fetch."""

import math
from typing import Generic, TypeVar

from pydantic import Field

from console_sync.schemas.base_schema_model import BaseSchemaModel

ItemT = TypeVar("ItemT")


class Page(BaseSchemaModel, Generic[ItemT]):
    """A page of entities as last returned by the server.

    This is the value stored in the resource cache for a query key.
    """

    items: list[ItemT] = Field(default_factory=list, description="Entities on this page")
    total: int = Field(..., ge=0, description="Total entities matching the query")
    page: int = Field(..., ge=1, description="1-based page number")
    page_size: int = Field(..., ge=1, description="Maximum entities per page")
    total_pages: int = Field(..., ge=0, description="Number of pages for the query")

    @property
    def ids(self) -> list[str]:
        """Identifiers of the entities on this page, in server order."""
        return [item.id for item in self.items]

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def count_pages(total: int, page_size: int) -> int:
    """Number of pages needed to show ``total`` entities."""
    return math.ceil(total / page_size) if total else 0
