"""
Boundary normalization for data handed over by collaborators.

Persistence and API layers disagree on key casing (bookId vs book_id) and
on criterion spelling. Everything is normalized here once, before it reaches
the rating engine.
"""
import logging
from typing import Any, Dict, Mapping, Sequence

from pydantic import ValidationError as PydanticValidationError

from sirened.core.errors import ValidationError
from sirened.models import CriteriaOrder, CriterionLike, RatingCriterion
from sirened.schemas.rating import RatingRecord

logger = logging.getLogger(__name__)

# Alternate spellings seen on persisted rows, mapped to RatingRecord fields
KEY_ALIASES = {
    "bookId": "book_id",
    "raterId": "rater_id",
    "userId": "rater_id",
    "user_id": "rater_id",
    "authorId": "author_id",
    "createdAt": "created_at",
}


def normalize_criterion(value: CriterionLike) -> RatingCriterion:
    """
    Normalize a criterion tag to RatingCriterion.

    Accepts enum members, any casing, surrounding whitespace and
    hyphen/underscore/space separators ("World-Building" -> worldbuilding).
    """
    if isinstance(value, RatingCriterion):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Invalid rating criterion: {value!r}", field="criteria")

    cleaned = value.strip().lower()
    for separator in ("-", "_", " "):
        cleaned = cleaned.replace(separator, "")
    try:
        return RatingCriterion(cleaned)
    except ValueError:
        logger.warning(f"Rejected unknown rating criterion: {value!r}")
        raise ValidationError(f"Unknown rating criterion: {value!r}", field="criteria")


def parse_criteria_order(values: Sequence[CriterionLike], version: int = 1) -> CriteriaOrder:
    """Build a CriteriaOrder from a stored or submitted list of tags."""
    if values is None or isinstance(values, (str, bytes)):
        raise ValidationError("Criteria order must be a list of criteria", field="criteria")
    return CriteriaOrder(tuple(normalize_criterion(v) for v in values), version=version)


def normalize_rating_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map a raw rating row onto RatingRecord field names.

    When both spellings of a key are present they must agree. A stored
    subscore of 0 means "not rated" and becomes None.
    """
    normalized: Dict[str, Any] = {}
    for key, value in payload.items():
        target = KEY_ALIASES.get(key, key)
        if target in normalized and normalized[target] != value:
            raise ValidationError(
                f"Conflicting values for {target}: {normalized[target]!r} vs {value!r}",
                field=target,
            )
        normalized[target] = value

    for criterion in RatingCriterion:
        if normalized.get(criterion.value) == 0 and not isinstance(normalized[criterion.value], bool):
            normalized[criterion.value] = None
    return normalized


def parse_rating_record(payload: Mapping[str, Any]) -> RatingRecord:
    """
    Parse a camelCase or snake_case rating payload into a RatingRecord.

    Raises:
        ValidationError: missing ids or subscores outside 1-5
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(f"Rating payload must be a mapping, got {type(payload).__name__}")

    data = normalize_rating_payload(payload)
    try:
        return RatingRecord.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        logger.warning(f"Rejected rating payload: {e.error_count()} error(s), first on {field}")
        raise ValidationError(f"Invalid rating: {field}: {first.get('msg')}", field=field) from e
