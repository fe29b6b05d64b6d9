"""
Aggregator.

Reduces many rating records (one book, one author, or one reader's history)
into per-criterion means and one overall value.

Order of operations is fixed: means first, then a single overall reduction
over the vector of means. Two AggregateProfiles are not combinable by
averaging them; recompute from the union of the underlying records instead.
"""
import logging
from collections import defaultdict
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Union

from sirened.core.config import settings
from sirened.core.errors import ValidationError
from sirened.models import OverallMode, RatingCriterion, RATING_CRITERIA
from sirened.schemas.rating import AggregateProfile, CriterionSentiment, RatingRecord
from sirened.services.criteria_weights import OrderLike
from sirened.services.rating_calculator import normalize_mode, overall_of

logger = logging.getLogger(__name__)

# (minimum positive ratio, label), checked top to bottom
SENTIMENT_THRESHOLDS = (
    (0.95, "overwhelmingly_positive"),
    (0.85, "very_positive"),
    (0.70, "mostly_positive"),
    (0.40, "mixed"),
    (0.30, "mostly_negative"),
    (0.15, "very_negative"),
    (0.0, "overwhelmingly_negative"),
)


def _criterion_means(records: Sequence[RatingRecord]) -> Dict[RatingCriterion, Optional[float]]:
    """Mean of each criterion over the records where it is present."""
    totals: Dict[RatingCriterion, float] = defaultdict(float)
    counts: Dict[RatingCriterion, int] = defaultdict(int)
    for record in records:
        for criterion, score in record.scores().items():
            if score is None:
                continue
            totals[criterion] += score
            counts[criterion] += 1
    return {
        c: (totals[c] / counts[c] if counts[c] else None)
        for c in RATING_CRITERIA
    }


def aggregate(
    records: Iterable[RatingRecord],
    mode: Union[OverallMode, str],
    order: Optional[OrderLike] = None,
) -> Optional[AggregateProfile]:
    """
    Build an AggregateProfile for a set of ratings.

    Args:
        records: Ratings scoped to one book, author or reader
        mode: Overall reduction applied to the vector of means
        order: CriteriaOrder, required for weighted mode

    Returns:
        AggregateProfile, or None when no record carries a subscore.
        `count` is the number of records with at least one subscore.
    """
    records = list(records)
    mode = normalize_mode(mode)
    if not records:
        return None

    for record in records:
        if not isinstance(record, RatingRecord):
            raise ValidationError(
                f"Expected RatingRecord, got {type(record).__name__}",
                field="records",
            )

    contributing = [r for r in records if any(s is not None for s in r.scores().values())]
    if not contributing:
        logger.debug(f"No subscores among {len(records)} ratings, nothing to aggregate")
        return None

    means = _criterion_means(contributing)
    overall = overall_of(means, mode, order)

    logger.debug(
        f"Aggregated {len(contributing)} ratings in {mode.value} mode: overall={overall:.4f}"
    )
    return AggregateProfile(
        **{c.value: means[c] for c in RATING_CRITERIA},
        overall=overall,
        count=len(contributing),
        mode=mode,
    )


def aggregate_by(
    records: Iterable[RatingRecord],
    key: Union[str, Callable[[RatingRecord], Hashable]],
    mode: Union[OverallMode, str],
    order: Optional[OrderLike] = None,
) -> Dict[Hashable, Optional[AggregateProfile]]:
    """
    Group records by a scope key and aggregate each group independently.

    `key` is a RatingRecord attribute name ("book_id", "author_id",
    "rater_id") or a callable. Records whose key is None are skipped.
    A group whose records carry no subscores maps to None.
    """
    if isinstance(key, str):
        if key not in RatingRecord.model_fields:
            raise ValidationError(f"Unknown scope key: {key!r}", field="key")
        attr = key
        key = lambda record: getattr(record, attr)  # noqa: E731

    groups: Dict[Hashable, List[RatingRecord]] = defaultdict(list)
    for record in records:
        scope = key(record)
        if scope is None:
            continue
        groups[scope].append(record)

    return {scope: aggregate(group, mode, order) for scope, group in groups.items()}


def reader_profile(records: Iterable[RatingRecord]) -> Optional[AggregateProfile]:
    """
    A reader's own historical averages per criterion.

    Used as the reader side of a compatibility comparison. Straight mode: the
    reader's own weights are applied later by the compatibility calculator.
    """
    return aggregate(records, OverallMode.STRAIGHT)


def sentiment_label(positive: int, negative: int) -> str:
    """Seven-level sentiment from the share of positive votes."""
    if positive + negative == 0:
        return "mixed"
    ratio = positive / (positive + negative)
    for minimum, label in SENTIMENT_THRESHOLDS:
        if ratio >= minimum:
            return label
    return SENTIMENT_THRESHOLDS[-1][1]


def criterion_sentiment(
    records: Iterable[RatingRecord],
    positive_min: Optional[int] = None,
    negative_max: Optional[int] = None,
) -> List[CriterionSentiment]:
    """
    Count positive and negative votes per criterion and label each.

    A subscore >= positive_min is a positive vote, <= negative_max a negative
    one; anything between is neutral and ignored. Defaults come from settings.
    """
    positive_min = settings.SENTIMENT_POSITIVE_MIN_SCORE if positive_min is None else positive_min
    negative_max = settings.SENTIMENT_NEGATIVE_MAX_SCORE if negative_max is None else negative_max
    if negative_max >= positive_min:
        raise ValidationError(
            f"Negative maximum ({negative_max}) must be below positive minimum ({positive_min})",
            field="negative_max",
        )

    positives: Dict[RatingCriterion, int] = defaultdict(int)
    negatives: Dict[RatingCriterion, int] = defaultdict(int)
    for record in records:
        for criterion, score in record.scores().items():
            if score is None:
                continue
            if score >= positive_min:
                positives[criterion] += 1
            elif score <= negative_max:
                negatives[criterion] += 1

    return [
        CriterionSentiment(
            criteria_name=c,
            total_positive=positives[c],
            total_negative=negatives[c],
            sentiment=sentiment_label(positives[c], negatives[c]),
        )
        for c in RATING_CRITERIA
    ]
