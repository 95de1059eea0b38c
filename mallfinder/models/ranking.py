"""Ranking query and result types."""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RankingQuery:
    """Per-interaction ranking parameters. None means "no constraint"."""

    radius_km: Optional[float] = None
    text_query: Optional[str] = None
    limit: Optional[int] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class RankedResult(Generic[T]):
    """A venue annotated with its distance from the ranking origin."""

    item: T
    distance_km: float


@dataclass(frozen=True)
class RankingReport(Generic[T]):
    """Ranked results plus the ids of venues skipped for bad locations."""

    results: list[RankedResult[T]] = field(default_factory=list)
    skipped_ids: list[object] = field(default_factory=list)
