from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, Dict
from datetime import datetime
from sirened.models import RatingCriterion, OverallMode, MIN_SCORE, MAX_SCORE


class RatingRecord(BaseModel):
    """One reader's evaluation of one book. Subscores are 1-5 or absent."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        coerce_numbers_to_str=True,  # persistence hands out integer ids
    )

    book_id: str
    rater_id: str
    author_id: Optional[str] = None  # Scope key when aggregating an author's body of work
    enjoyment: Optional[int] = Field(default=None, ge=MIN_SCORE, le=MAX_SCORE)
    writing: Optional[int] = Field(default=None, ge=MIN_SCORE, le=MAX_SCORE)
    themes: Optional[int] = Field(default=None, ge=MIN_SCORE, le=MAX_SCORE)
    characters: Optional[int] = Field(default=None, ge=MIN_SCORE, le=MAX_SCORE)
    worldbuilding: Optional[int] = Field(default=None, ge=MIN_SCORE, le=MAX_SCORE)
    review: Optional[str] = None
    created_at: Optional[datetime] = None

    def scores(self) -> Dict[RatingCriterion, Optional[int]]:
        return {c: getattr(self, c.value) for c in RatingCriterion}


class AggregateProfile(BaseModel):
    """Per-criterion means across many ratings, plus one overall value."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    enjoyment: Optional[float] = None
    writing: Optional[float] = None
    themes: Optional[float] = None
    characters: Optional[float] = None
    worldbuilding: Optional[float] = None
    overall: float
    count: int
    mode: Optional[OverallMode] = None  # unset when built from a plain collaborator dict

    def means(self) -> Dict[RatingCriterion, Optional[float]]:
        return {c: getattr(self, c.value) for c in RatingCriterion}


class CriterionCompatibility(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    difference: float
    normalized: float  # difference / 4.0, clamped to [0, 1]
    compatibility: str  # label for 1 - normalized


class CompatibilityResult(BaseModel):
    """
    Reader-to-author compatibility.

    When has_enough_ratings is False only ratings_needed is set; callers must
    check the gate before reading score, overall or criteria.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    has_enough_ratings: bool
    total_ratings: int
    ratings_needed: Optional[int] = None
    score: Optional[float] = None  # 0..1
    overall: Optional[str] = None  # qualitative label
    normalized_difference: Optional[float] = None
    criteria: Optional[Dict[RatingCriterion, CriterionCompatibility]] = None


class CriterionSentiment(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    criteria_name: RatingCriterion
    total_positive: int
    total_negative: int
    sentiment: str
