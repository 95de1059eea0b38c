"""Proximity ranking service.

Turns a user position and a collection of geo-tagged venues into a
distance-sorted result list, optionally narrowed by text, category and
radius, and truncated to the nearest N.
"""

from typing import Optional, Sequence, TypeVar

from mallfinder.logging import get_logger
from mallfinder.models.geo import GeoPoint, HasCategories, HasLocation, InvalidCoordinate
from mallfinder.models.ranking import RankedResult, RankingQuery, RankingReport
from mallfinder.services.distance import haversine_km, within_radius

logger = get_logger(__name__)

V = TypeVar("V", bound=HasLocation)


def tokenize(text_query: Optional[str]) -> list[str]:
    """Split a search query into lowercase whitespace-delimited tokens."""
    if not text_query:
        return []
    return text_query.lower().split()


def matches_tokens(searchable_text: str, tokens: Sequence[str]) -> bool:
    """True when every token is a substring of the text, case-insensitively."""
    haystack = searchable_text.lower()
    return all(token in haystack for token in tokens)


def matches_category(venue: object, category: Optional[str]) -> bool:
    if category is None:
        return True
    return isinstance(venue, HasCategories) and category in venue.categories


class ProximityRankingService:
    """Ranks venues by great-circle distance from an origin."""

    def rank(
        self,
        origin: GeoPoint,
        venues: Sequence[V],
        query: Optional[RankingQuery] = None,
    ) -> list[RankedResult[V]]:
        """Rank venues and return only the ordered results."""
        return self.rank_with_report(origin, venues, query).results

    def rank_with_report(
        self,
        origin: GeoPoint,
        venues: Sequence[V],
        query: Optional[RankingQuery] = None,
    ) -> RankingReport[V]:
        """Rank venues, also reporting which ones had unusable locations.

        Raises:
            InvalidCoordinate: if the origin itself is not a valid point
            ValueError: if the radius or limit is negative
        """
        query = query or RankingQuery()
        self._validate(origin, query)

        tokens = tokenize(query.text_query)
        results: list[RankedResult[V]] = []
        skipped: list[object] = []

        for venue in venues:
            try:
                location = venue.location
            except InvalidCoordinate as e:
                logger.warning(
                    "venue_location_invalid",
                    venue_id=str(venue.id),
                    latitude=e.latitude,
                    longitude=e.longitude,
                )
                skipped.append(venue.id)
                continue

            if location is None:
                skipped.append(venue.id)
                continue

            if not self._passes_filters(venue, tokens, query.category):
                continue

            distance = haversine_km(origin, location)
            if query.radius_km is not None and not within_radius(distance, query.radius_km):
                continue

            results.append(RankedResult(item=venue, distance_km=distance))

        # list.sort is stable: equal distances keep input order
        results.sort(key=lambda r: r.distance_km)

        if query.limit is not None:
            results = results[: query.limit]

        if skipped:
            logger.info("venues_skipped", count=len(skipped))

        return RankingReport(results=results, skipped_ids=skipped)

    def filter(self, venues: Sequence[V], query: Optional[RankingQuery] = None) -> list[V]:
        """Apply the text and category filters only, keeping input order.

        Used where every venue shares one location, such as the stores of
        a single mall.
        """
        query = query or RankingQuery()
        tokens = tokenize(query.text_query)
        kept = [v for v in venues if self._passes_filters(v, tokens, query.category)]
        if query.limit is not None:
            kept = kept[: query.limit]
        return kept

    def _passes_filters(self, venue: V, tokens: Sequence[str], category: Optional[str]) -> bool:
        if tokens and not matches_tokens(venue.searchable_text, tokens):
            return False
        return matches_category(venue, category)

    def _validate(self, origin: GeoPoint, query: RankingQuery) -> None:
        # raises InvalidCoordinate for a malformed origin
        GeoPoint(origin.latitude, origin.longitude)
        if query.radius_km is not None and query.radius_km < 0:
            raise ValueError("radius_km must be >= 0")
        if query.limit is not None and query.limit < 0:
            raise ValueError("limit must be >= 0")
