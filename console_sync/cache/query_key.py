"""Canonical cache keys for list fetches."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from console_sync.enums.resource import ResourceKind

FilterItems = tuple[tuple[str, str], ...]


def canonicalize_filters(filters: Mapping[str, Any] | None) -> FilterItems:
    """Reduce a filter mapping to its canonical, hashable form.

    Absent (None) and blank values are dropped, so ``{"status": ""}``,
    ``{"status": None}`` and ``{}`` are the same filter set. Enum members
    become their values and strings are stripped. The result is sorted by
    filter name.

    Args:
        filters: Filter name -> value mapping, or None

    Returns:
        Sorted tuple of (name, value) pairs
    """
    if not filters:
        return ()

    canonical: dict[str, str] = {}
    for name, value in filters.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        text = value.strip() if isinstance(value, str) else str(value)
        if text:
            canonical[name] = text
    return tuple(sorted(canonical.items()))


class QueryKey(BaseModel):
    """Identity of one cached list page: kind, page, page size and filters.

    Equal keys address the same cache slot; build them through
    ``QueryKey.build`` so semantically equal filter sets compare equal.
    """

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    filters: FilterItems = ()

    @classmethod
    def build(
        cls,
        kind: ResourceKind | str,
        page: int,
        page_size: int,
        filters: Mapping[str, Any] | None = None,
    ) -> "QueryKey":
        return cls(
            kind=kind,
            page=page,
            page_size=page_size,
            filters=canonicalize_filters(filters),
        )

    @property
    def filter_dict(self) -> dict[str, str]:
        return dict(self.filters)

    def get_filter(self, name: str) -> str | None:
        return self.filter_dict.get(name)

    def __str__(self) -> str:
        filters = ",".join(f"{name}={value}" for name, value in self.filters)
        return f"{self.kind.value}[page={self.page},size={self.page_size}|{filters}]"
