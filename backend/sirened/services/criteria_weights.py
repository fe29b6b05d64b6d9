"""
Criteria weight model.

Assigns the constant position weights to a reader's ranking of the five
rating criteria. The weights never change; only which criterion sits at
which rank does.
"""
import logging
from typing import Dict, Sequence, Union

from sirened.models import (
    CriteriaOrder,
    CriterionLike,
    RatingCriterion,
    POSITION_WEIGHTS,
)

logger = logging.getLogger(__name__)

OrderLike = Union[CriteriaOrder, Sequence[CriterionLike]]


def default_order() -> CriteriaOrder:
    """Order assigned to a reader at onboarding."""
    return CriteriaOrder.default()


def weights_for(order: OrderLike) -> Dict[RatingCriterion, float]:
    """
    Map each criterion to the weight of its rank in `order`.

    Rank 1 gets 0.35, then 0.25, 0.20, 0.12 and 0.08. The values always sum
    to 1.0.

    Raises:
        ValidationError: if `order` is not a permutation of the five criteria
    """
    order = CriteriaOrder.coerce(order)
    weights = {criterion: POSITION_WEIGHTS[i] for i, criterion in enumerate(order.criteria)}
    logger.debug(f"Weights for order v{order.version} {order.as_list()}: {weights}")
    return weights


def weight_percentages(order: OrderLike) -> Dict[RatingCriterion, str]:
    """Display labels like "35%" for each criterion's weight."""
    return {c: f"{w * 100:.0f}%" for c, w in weights_for(order).items()}
