"""Rating aggregate over a product's approved reviews."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from storefront.reviews.review import MAX_RATING, MIN_RATING


def _empty_distribution() -> dict[int, int]:
    return {score: 0 for score in range(MIN_RATING, MAX_RATING + 1)}


def _recalculate_average(distribution: dict[int, int]) -> float | None:
    total = sum(distribution.values())
    if total == 0:
        return None
    weighted_sum = sum(score * count for score, count in distribution.items())
    return round(weighted_sum / total, 2)


@dataclass(frozen=True)
class RatingSummary:
    """`average` is None, not zero, when there is nothing to average."""

    average: float | None
    count: int
    distribution: dict[int, int] = field(default_factory=_empty_distribution)

    @classmethod
    def from_ratings(cls, ratings: Iterable[int]) -> RatingSummary:
        distribution = _empty_distribution()
        for score in ratings:
            distribution[score] = distribution.get(score, 0) + 1
        return cls(
            average=_recalculate_average(distribution),
            count=sum(distribution.values()),
            distribution=distribution,
        )
