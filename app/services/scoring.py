"""
Rating to score mapping and the averages built on top of it.

One table is used everywhere: EXCEEDS 90, MEETS 75, NEEDS_IMPROVEMENT 60,
UNSATISFACTORY 40. A missing or unrecognised rating scores 0 and still
counts toward the denominator of an average.
"""
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from app.models.performance_review import PerformanceRating

T = TypeVar("T")

RATING_SCORES: Dict[PerformanceRating, int] = {
    PerformanceRating.EXCEEDS_EXPECTATIONS: 90,
    PerformanceRating.MEETS_EXPECTATIONS: 75,
    PerformanceRating.NEEDS_IMPROVEMENT: 60,
    PerformanceRating.UNSATISFACTORY: 40,
}

# Lower bounds, checked in order
DISTRIBUTION_BANDS = (("excellent", 90), ("good", 75), ("average", 50))


def map_rating_to_score(rating: Optional[Union[PerformanceRating, str]]) -> int:
    if rating is None:
        return 0
    try:
        return RATING_SCORES[PerformanceRating(rating)]
    except ValueError:
        return 0


def average(values: Sequence[float]) -> float:
    """Mean rounded to one decimal; 0 for an empty sequence."""
    if not values:
        return 0
    return round(sum(values) / len(values), 1)


def employee_average(ratings: Iterable[Optional[PerformanceRating]]) -> float:
    return average([map_rating_to_score(rating) for rating in ratings])


def team_average(member_averages: Sequence[float]) -> float:
    """Members without reviews are expected to be passed in as 0."""
    return average(member_averages)


def sort_by_score(items: Iterable[T], key: Callable[[T], float]) -> List[T]:
    """Stable, highest score first."""
    return sorted(items, key=key, reverse=True)


def score_band(score: float) -> str:
    for band, lower_bound in DISTRIBUTION_BANDS:
        if score >= lower_bound:
            return band
    return "poor"


def score_distribution(scores: Iterable[float]) -> Dict[str, int]:
    distribution = {"excellent": 0, "good": 0, "average": 0, "poor": 0}
    for score in scores:
        distribution[score_band(score)] += 1
    return distribution
