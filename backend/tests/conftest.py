"""Pytest configuration for rating engine tests."""
import sys
from pathlib import Path
from datetime import datetime
import pytest

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from sirened.models import CriteriaOrder, RatingCriterion
from sirened.schemas.rating import RatingRecord


@pytest.fixture
def make_record():
    """
    Factory for RatingRecord objects.

    Subscores default to 3; pass a criterion name with None to omit it.
    """
    counter = {"n": 0}

    def _make(book_id="book-1", rater_id=None, author_id="author-1", **scores):
        counter["n"] += 1
        values = {c.value: 3 for c in RatingCriterion}
        values.update(scores)
        return RatingRecord(
            book_id=book_id,
            rater_id=rater_id or f"reader-{counter['n']}",
            author_id=author_id,
            created_at=datetime(2024, 6, 1, 12, 0, 0),
            **values,
        )

    return _make


@pytest.fixture
def default_order() -> CriteriaOrder:
    """Onboarding order: enjoyment, writing, themes, characters, worldbuilding."""
    return CriteriaOrder.default()


@pytest.fixture
def reversed_order() -> CriteriaOrder:
    return CriteriaOrder(
        (
            RatingCriterion.WORLDBUILDING,
            RatingCriterion.CHARACTERS,
            RatingCriterion.THEMES,
            RatingCriterion.WRITING,
            RatingCriterion.ENJOYMENT,
        )
    )
