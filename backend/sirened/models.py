from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple, Union
import enum

from sirened.core.errors import ValidationError


class RatingCriterion(str, enum.Enum):
    ENJOYMENT = "enjoyment"
    WRITING = "writing"
    THEMES = "themes"
    CHARACTERS = "characters"
    WORLDBUILDING = "worldbuilding"


class OverallMode(str, enum.Enum):
    """How a set of subscores is reduced to a single overall value."""
    WEIGHTED = "weighted"  # rank-weighted by a reader's CriteriaOrder
    STRAIGHT = "straight"  # unweighted mean of present subscores


# Declaration order doubles as the onboarding default
RATING_CRITERIA: Tuple[RatingCriterion, ...] = tuple(RatingCriterion)

# Position-based weights, rank 1 first. Constant of the system.
POSITION_WEIGHTS: Tuple[float, ...] = (0.35, 0.25, 0.20, 0.12, 0.08)

MIN_SCORE = 1
MAX_SCORE = 5
MAX_SCORE_DIFFERENCE = float(MAX_SCORE - MIN_SCORE)


CriterionLike = Union[RatingCriterion, str]


def _coerce_criterion(value: CriterionLike) -> RatingCriterion:
    if isinstance(value, RatingCriterion):
        return value
    try:
        return RatingCriterion(value)
    except ValueError:
        raise ValidationError(
            f"Unknown rating criterion: {value!r}. Must be one of: {', '.join(c.value for c in RATING_CRITERIA)}",
            field="criteria",
        )


@dataclass(frozen=True)
class CriteriaOrder:
    """
    A reader's ranking of the five rating criteria, most important first.

    Immutable: reordering returns a new CriteriaOrder with a bumped version,
    so a saved order is always replaced wholesale.
    """
    criteria: Tuple[RatingCriterion, ...]
    version: int = 1
    _ranks: Dict[RatingCriterion, int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.criteria, (str, bytes)) or not isinstance(self.criteria, Iterable):
            raise ValidationError("Criteria order must be a sequence of criteria", field="criteria")

        criteria = tuple(_coerce_criterion(c) for c in self.criteria)

        duplicates = sorted({c.value for c in criteria if criteria.count(c) > 1})
        if duplicates:
            raise ValidationError(
                f"Criteria order contains duplicates: {', '.join(duplicates)}",
                field="criteria",
            )

        missing = [c.value for c in RATING_CRITERIA if c not in criteria]
        if missing or len(criteria) != len(RATING_CRITERIA):
            raise ValidationError(
                f"Criteria order must rank all {len(RATING_CRITERIA)} criteria, missing: {', '.join(missing)}",
                field="criteria",
            )

        if isinstance(self.version, bool) or not isinstance(self.version, int):
            raise ValidationError(f"Invalid version: {self.version!r}. Must be an integer", field="version")
        if self.version < 1:
            raise ValidationError(f"Invalid version: {self.version}. Must be >= 1", field="version")

        object.__setattr__(self, "criteria", criteria)
        object.__setattr__(self, "_ranks", {c: i + 1 for i, c in enumerate(criteria)})

    @classmethod
    def default(cls) -> "CriteriaOrder":
        return cls(RATING_CRITERIA)

    @classmethod
    def coerce(cls, value: Union["CriteriaOrder", Sequence[CriterionLike]]) -> "CriteriaOrder":
        """Accept an existing order or a raw sequence of criterion tags."""
        if isinstance(value, CriteriaOrder):
            return value
        if value is None:
            raise ValidationError("Criteria order is required", field="criteria")
        return cls(value)

    def rank_of(self, criterion: CriterionLike) -> int:
        """1-based rank of a criterion (1 = most important)."""
        return self._ranks[_coerce_criterion(criterion)]

    def moved(self, criterion: CriterionLike, position: int) -> "CriteriaOrder":
        """
        Return a new order with `criterion` moved to 1-based `position`.

        Mirrors a drag-and-drop reorder: the other criteria keep their
        relative order.
        """
        target = _coerce_criterion(criterion)
        if not 1 <= position <= len(self.criteria):
            raise ValidationError(
                f"Invalid position: {position}. Must be 1-{len(self.criteria)}",
                field="position",
            )
        remaining: List[RatingCriterion] = [c for c in self.criteria if c != target]
        remaining.insert(position - 1, target)
        return CriteriaOrder(tuple(remaining), version=self.version + 1)

    def permuted(self, permutation: Sequence[int]) -> "CriteriaOrder":
        """
        Reorder by index permutation: new[i] = old[permutation[i]].

        Keeps the version; this is a value transform, not a reader save.
        """
        if sorted(permutation) != list(range(len(self.criteria))):
            raise ValidationError(
                f"Invalid permutation: {list(permutation)}",
                field="permutation",
            )
        return CriteriaOrder(tuple(self.criteria[i] for i in permutation), version=self.version)

    def as_list(self) -> List[str]:
        return [c.value for c in self.criteria]


def inverse_permutation(permutation: Sequence[int]) -> List[int]:
    """Index permutation undoing `permutation` when passed to CriteriaOrder.permuted."""
    inverse = [0] * len(permutation)
    for new_index, old_index in enumerate(permutation):
        inverse[old_index] = new_index
    return inverse
