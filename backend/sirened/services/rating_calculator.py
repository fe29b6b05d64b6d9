"""
Rating calculator.

Reduces one set of five subscores to a single overall value. Two modes exist
because different product surfaces disagree on which one is "the" overall
rating; callers must pick one explicitly.
"""
import logging
from typing import Mapping, Optional, Union

from sirened.core.errors import ValidationError
from sirened.models import OverallMode, RatingCriterion, MIN_SCORE, MAX_SCORE
from sirened.schemas.rating import RatingRecord
from sirened.services.criteria_weights import OrderLike, weights_for

logger = logging.getLogger(__name__)

Scores = Mapping[Union[RatingCriterion, str], Optional[float]]


def normalize_mode(mode: Union[OverallMode, str]) -> OverallMode:
    if isinstance(mode, OverallMode):
        return mode
    try:
        return OverallMode(str(mode).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown overall mode: {mode!r}. Must be 'weighted' or 'straight'",
            field="mode",
        )


def _present_scores(record: Union[RatingRecord, Scores]) -> dict:
    """
    Collect the present subscores keyed by criterion.

    Absent criteria (None, or 0 as stored for "not rated") are left out
    entirely. Unknown keys and other values outside 1-5 raise.
    """
    raw = record.scores() if isinstance(record, RatingRecord) else record
    if raw is None:
        raise ValidationError("Scores are required", field="scores")

    present = {}
    for key, value in raw.items():
        try:
            criterion = RatingCriterion(key)
        except ValueError:
            raise ValidationError(f"Unknown rating criterion: {key!r}", field="scores")
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(
                f"Invalid {criterion.value} score: {value!r}. Must be a number",
                field=criterion.value,
            )
        if value == 0:
            continue
        if not MIN_SCORE <= value <= MAX_SCORE:
            raise ValidationError(
                f"Invalid {criterion.value} score: {value}. Must be {MIN_SCORE}-{MAX_SCORE}",
                field=criterion.value,
            )
        present[criterion] = float(value)
    return present


def overall_of(
    record: Union[RatingRecord, Scores],
    mode: Union[OverallMode, str],
    order: Optional[OrderLike] = None,
    *,
    renormalize: bool = False,
) -> float:
    """
    Compute the overall value of one rating (or of a vector of means).

    Args:
        record: RatingRecord or mapping of criterion -> score (None = absent)
        mode: OverallMode.WEIGHTED or OverallMode.STRAIGHT
        order: Reader's CriteriaOrder, required for weighted mode
        renormalize: Weighted mode only. When True, divide by the total weight
            of the present criteria instead of letting a missing criterion
            lower the result.

    Returns:
        Overall value; 0.0 when no criterion is present

    Raises:
        ValidationError: unknown mode, missing/invalid order in weighted mode,
            or malformed scores
    """
    mode = normalize_mode(mode)
    scores = _present_scores(record)

    if mode is OverallMode.WEIGHTED:
        if order is None:
            raise ValidationError("Weighted mode requires a criteria order", field="order")
        weights = weights_for(order)
        total = sum(score * weights[c] for c, score in scores.items())
        if renormalize:
            present_weight = sum(weights[c] for c in scores)
            total = total / present_weight if present_weight > 0 else 0.0
        logger.debug(
            f"Weighted overall={total:.4f} over {len(scores)} criteria (renormalize={renormalize})"
        )
        return total

    if not scores:
        return 0.0
    overall = sum(scores.values()) / len(scores)
    logger.debug(f"Straight overall={overall:.4f} over {len(scores)} criteria")
    return overall
