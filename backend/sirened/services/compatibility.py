"""
Compatibility calculator.

Compares a reader's taste profile (their own historical averages per
criterion) with an author's aggregate profile. The criteria the reader ranks
highest dominate the result.
"""
import logging
from typing import Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from sirened.core.config import settings
from sirened.core.errors import ValidationError
from sirened.models import (
    CriteriaOrder,
    RatingCriterion,
    RATING_CRITERIA,
    MIN_SCORE,
    MAX_SCORE,
    MAX_SCORE_DIFFERENCE,
)
from sirened.schemas.rating import AggregateProfile, CompatibilityResult, CriterionCompatibility
from sirened.services.criteria_weights import OrderLike, weights_for

logger = logging.getLogger(__name__)

# (minimum score, label), checked top to bottom; the last entry catches the rest
COMPATIBILITY_LABELS = (
    (0.85, "Highly Compatible"),
    (0.65, "Compatible"),
    (0.45, "Moderately Compatible"),
    (0.25, "Somewhat Different"),
    (0.0, "Low Compatibility"),
)

ReaderValues = Union[AggregateProfile, Mapping[Union[RatingCriterion, str], Optional[float]]]


def compatibility_label(score: float) -> str:
    for minimum, label in COMPATIBILITY_LABELS:
        if score >= minimum:
            return label
    return COMPATIBILITY_LABELS[-1][1]


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _reader_value_map(reader_values: ReaderValues) -> dict:
    if reader_values is None:
        raise ValidationError("Reader profile is required", field="reader_values")
    if isinstance(reader_values, AggregateProfile):
        return reader_values.means()
    if not isinstance(reader_values, Mapping):
        raise ValidationError(
            f"Reader profile must be a mapping or AggregateProfile, got {type(reader_values).__name__}",
            field="reader_values",
        )

    values = {}
    for key, value in reader_values.items():
        try:
            values[RatingCriterion(key)] = value
        except ValueError:
            raise ValidationError(f"Unknown rating criterion: {key!r}", field="reader_values")
    return values


def _author_profile(author_profile) -> AggregateProfile:
    """Accept an AggregateProfile or its plain-dict wire shape."""
    if isinstance(author_profile, AggregateProfile):
        return author_profile
    if not isinstance(author_profile, Mapping):
        raise ValidationError(
            f"Author profile must be a mapping or AggregateProfile, got {type(author_profile).__name__}",
            field="author_profile",
        )
    try:
        return AggregateProfile.model_validate(author_profile)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid author profile: {e.error_count()} error(s)", field="author_profile") from e


def _criterion_value(values: dict, criterion: RatingCriterion, side: str) -> float:
    value = values.get(criterion)
    if value is None:
        raise ValidationError(
            f"{side} profile has no {criterion.value} value",
            field=criterion.value,
        )
    if not MIN_SCORE <= value <= MAX_SCORE:
        raise ValidationError(
            f"{side} {criterion.value} value {value} is outside {MIN_SCORE}-{MAX_SCORE}",
            field=criterion.value,
        )
    return float(value)


def compatibility(
    reader_order: OrderLike,
    author_profile: Optional[Union[AggregateProfile, Mapping]],
    total_ratings: int,
    reader_values: Optional[ReaderValues] = None,
    min_ratings: Optional[int] = None,
) -> CompatibilityResult:
    """
    Score how well an author's body of work matches a reader's taste.

    Args:
        reader_order: Reader's CriteriaOrder (drives per-criterion weights)
        author_profile: Aggregate of the author's ratings, as an AggregateProfile
            or its plain-dict shape (enjoyment..worldbuilding, overall, count)
        total_ratings: Ratings collected for this author so far
        reader_values: Reader's own average per criterion on the 1-5 scale,
            as a mapping or an AggregateProfile (see aggregator.reader_profile)
        min_ratings: Gate threshold; defaults to settings.MIN_RATINGS_FOR_COMPATIBILITY

    Returns:
        CompatibilityResult. Below the gate only has_enough_ratings=False and
        ratings_needed are meaningful.

    Raises:
        ValidationError: author_profile is None or malformed, reader_order or
            min_ratings is invalid, or
            (past the gate) a criterion is missing on either side
    """
    if author_profile is None:
        raise ValidationError(
            "Author profile is required; check for 'no ratings yet' before computing compatibility",
            field="author_profile",
        )
    author_profile = _author_profile(author_profile)
    order = CriteriaOrder.coerce(reader_order)
    weights = weights_for(order)
    if total_ratings < 0:
        raise ValidationError(f"Invalid total_ratings: {total_ratings}", field="total_ratings")

    threshold = settings.MIN_RATINGS_FOR_COMPATIBILITY if min_ratings is None else min_ratings
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise ValidationError(f"Invalid min_ratings: {threshold!r}. Must be >= 1", field="min_ratings")
    if total_ratings < threshold:
        logger.debug(f"Compatibility gated: {total_ratings}/{threshold} ratings")
        return CompatibilityResult(
            has_enough_ratings=False,
            total_ratings=total_ratings,
            ratings_needed=threshold - total_ratings,
        )

    reader = _reader_value_map(reader_values)
    author = author_profile.means()

    criteria = {}
    overall_normalized = 0.0
    for criterion in RATING_CRITERIA:
        difference = abs(
            _criterion_value(reader, criterion, "Reader")
            - _criterion_value(author, criterion, "Author")
        )
        normalized = _clamp(difference / MAX_SCORE_DIFFERENCE)
        criteria[criterion] = CriterionCompatibility(
            difference=difference,
            normalized=normalized,
            compatibility=compatibility_label(1.0 - normalized),
        )
        overall_normalized += weights[criterion] * normalized

    overall_normalized = _clamp(overall_normalized)
    score = _clamp(1.0 - overall_normalized)
    label = compatibility_label(score)

    logger.debug(
        f"Compatibility score={score:.4f} ({label}) from {total_ratings} ratings, "
        f"order v{order.version}"
    )
    return CompatibilityResult(
        has_enough_ratings=True,
        total_ratings=total_ratings,
        score=score,
        overall=label,
        normalized_difference=overall_normalized,
        criteria=criteria,
    )
