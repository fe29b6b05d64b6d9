"""Tests for the weighted and straight overall rating calculations."""
import pytest
from sirened.core.errors import ValidationError
from sirened.models import OverallMode, RatingCriterion
from sirened.services.rating_calculator import overall_of, normalize_mode


def test_straight_mode_all_fours(make_record):
    """Test that straight mode on five 4s returns exactly 4.0."""
    record = make_record(enjoyment=4, writing=4, themes=4, characters=4, worldbuilding=4)
    assert overall_of(record, OverallMode.STRAIGHT) == 4.0


def test_straight_mode_ignores_order(make_record, default_order, reversed_order):
    """Test that the criteria order has no effect in straight mode."""
    record = make_record(enjoyment=5, writing=1, themes=2, characters=3, worldbuilding=4)
    assert overall_of(record, "straight") == 3.0
    assert overall_of(record, "straight", default_order) == overall_of(record, "straight", reversed_order)


def test_weighted_mode_reversed_order(make_record, reversed_order):
    """Test the weighted sum when enjoyment is ranked last."""
    record = make_record(enjoyment=5, writing=1, themes=1, characters=1, worldbuilding=1)
    result = overall_of(record, OverallMode.WEIGHTED, reversed_order)
    assert result == pytest.approx(1 * 0.35 + 1 * 0.25 + 1 * 0.20 + 1 * 0.12 + 5 * 0.08)
    assert result == pytest.approx(1.32)


def test_weighted_mode_default_order(make_record, default_order):
    """Test the weighted sum when enjoyment is ranked first."""
    record = make_record(enjoyment=5, writing=1, themes=1, characters=1, worldbuilding=1)
    assert overall_of(record, "weighted", default_order) == pytest.approx(2.4)


def test_weighted_mode_accepts_raw_order(make_record):
    """Test that a plain list of tags is accepted as the order."""
    record = make_record(enjoyment=4, writing=4, themes=4, characters=4, worldbuilding=4)
    order = ["themes", "writing", "enjoyment", "characters", "worldbuilding"]
    assert overall_of(record, "weighted", order) == pytest.approx(4.0)


def test_weighted_mode_requires_order(make_record):
    """Test that weighted mode without an order raises instead of defaulting."""
    with pytest.raises(ValidationError) as exc_info:
        overall_of(make_record(), OverallMode.WEIGHTED)
    assert exc_info.value.field == "order"


def test_weighted_mode_rejects_invalid_order(make_record):
    """Test that an invalid order propagates the weight model's error."""
    with pytest.raises(ValidationError):
        overall_of(make_record(), OverallMode.WEIGHTED, ["enjoyment", "writing"])


def test_weighted_missing_criterion_drops_contribution(make_record, default_order):
    """Test that a missing subscore lowers the weighted total (no renormalization)."""
    record = make_record(enjoyment=None, writing=4, themes=4, characters=4, worldbuilding=4)
    # enjoyment (0.35) is missing: 4 * 0.65
    assert overall_of(record, OverallMode.WEIGHTED, default_order) == pytest.approx(2.6)


def test_weighted_missing_criterion_with_renormalize(make_record, default_order):
    """Test that explicit renormalization divides by the present weight."""
    record = make_record(enjoyment=None, writing=4, themes=4, characters=4, worldbuilding=4)
    result = overall_of(record, OverallMode.WEIGHTED, default_order, renormalize=True)
    assert result == pytest.approx(4.0)


def test_straight_missing_criterion_excluded_from_denominator(make_record):
    """Test that the straight mean divides by present criteria only."""
    record = make_record(enjoyment=5, writing=None, themes=3, characters=None, worldbuilding=4)
    assert overall_of(record, OverallMode.STRAIGHT) == pytest.approx(4.0)


def test_zero_scores_in_mapping_are_treated_as_absent():
    """Test that 0 (stored for "not rated") is excluded in both modes."""
    scores = {"enjoyment": 5, "writing": 0, "themes": 5, "characters": 5, "worldbuilding": 5}
    assert overall_of(scores, OverallMode.STRAIGHT) == 5.0
    weighted = overall_of(scores, OverallMode.WEIGHTED, ["writing", "enjoyment", "themes", "characters", "worldbuilding"])
    assert weighted == pytest.approx(5 * 0.65)


def test_no_scores_returns_zero(make_record, default_order):
    """Test that a record without any subscores returns 0.0 in both modes."""
    record = make_record(enjoyment=None, writing=None, themes=None, characters=None, worldbuilding=None)
    assert overall_of(record, OverallMode.STRAIGHT) == 0.0
    assert overall_of(record, OverallMode.WEIGHTED, default_order) == 0.0
    assert overall_of(record, OverallMode.WEIGHTED, default_order, renormalize=True) == 0.0


def test_mapping_of_means_is_accepted(default_order):
    """Test that float means (as produced by the aggregator) are accepted."""
    means = {
        RatingCriterion.ENJOYMENT: 4.5,
        RatingCriterion.WRITING: 3.5,
        RatingCriterion.THEMES: 4.0,
        RatingCriterion.CHARACTERS: 2.5,
        RatingCriterion.WORLDBUILDING: 1.5,
    }
    expected = 4.5 * 0.35 + 3.5 * 0.25 + 4.0 * 0.20 + 2.5 * 0.12 + 1.5 * 0.08
    assert overall_of(means, OverallMode.WEIGHTED, default_order) == pytest.approx(expected)


def test_out_of_range_score_rejected():
    """Test that scores outside 1-5 raise ValidationError."""
    with pytest.raises(ValidationError) as exc_info:
        overall_of({"enjoyment": 6}, OverallMode.STRAIGHT)
    assert exc_info.value.field == "enjoyment"


def test_unknown_criterion_rejected():
    """Test that unknown criteria keys raise ValidationError."""
    with pytest.raises(ValidationError):
        overall_of({"pacing": 4}, OverallMode.STRAIGHT)


def test_non_numeric_score_rejected():
    """Test that strings are not silently coerced."""
    with pytest.raises(ValidationError):
        overall_of({"enjoyment": "4"}, OverallMode.STRAIGHT)


def test_normalize_mode_variants():
    """Test mode normalization from strings and enum members."""
    assert normalize_mode(OverallMode.WEIGHTED) is OverallMode.WEIGHTED
    assert normalize_mode("Straight") is OverallMode.STRAIGHT
    assert normalize_mode(" weighted ") is OverallMode.WEIGHTED


def test_unknown_mode_rejected(make_record):
    """Test that an unknown mode raises ValidationError."""
    with pytest.raises(ValidationError) as exc_info:
        overall_of(make_record(), "median")
    assert exc_info.value.field == "mode"
