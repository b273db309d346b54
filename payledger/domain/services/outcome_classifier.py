"""
OUTCOME CLASSIFIER
AllocationOutcome → category → message / HTTP status

The category is decided first from the outcome's numbers; messages and
status codes are derived from the category only.
"""

from decimal import Decimal
from typing import Dict

from payledger.domain.exceptions import InconsistentOutcomeError
from payledger.domain.models import AllocationOutcome, OutcomeCategory


CATEGORY_STATUS: Dict[OutcomeCategory, int] = {
    OutcomeCategory.NOTHING_TO_PAY: 200,
    OutcomeCategory.SETTLED: 200,
    OutcomeCategory.REJECTED_EXCESS: 422,
    OutcomeCategory.REJECTED_INSUFFICIENT: 400,
}


def classify(outcome: AllocationOutcome) -> OutcomeCategory:
    """
    Map an outcome to exactly one category

    Raises:
        InconsistentOutcomeError: outcome fits no category (e.g. money
            left over next to a settlement)
    """
    required = outcome.required_amount

    if outcome.settled_count > 0:
        if outcome.remaining_amount == Decimal('0') and required is None:
            return OutcomeCategory.SETTLED
        raise InconsistentOutcomeError(outcome.settled_count, outcome.remaining_amount)

    if required is None:
        return OutcomeCategory.NOTHING_TO_PAY

    if outcome.requested_amount > required:
        return OutcomeCategory.REJECTED_EXCESS

    if outcome.requested_amount < required:
        return OutcomeCategory.REJECTED_INSUFFICIENT

    raise InconsistentOutcomeError(outcome.settled_count, outcome.remaining_amount)


def http_status_for(category: OutcomeCategory) -> int:
    return CATEGORY_STATUS[category]


def format_message(category: OutcomeCategory, outcome: AllocationOutcome) -> str:
    """Human-readable message for a classified outcome"""
    if category == OutcomeCategory.NOTHING_TO_PAY:
        return "No outstanding obligations to pay."

    if category == OutcomeCategory.SETTLED:
        return (
            f"Payment accepted. Settled {outcome.settled_count} obligation(s) "
            f"for a total of ${outcome.settled_total}."
        )

    if category == OutcomeCategory.REJECTED_EXCESS:
        return (
            f"Payment rejected. The amount ${outcome.requested_amount} exceeds "
            f"the exact amount required of ${outcome.required_amount}. "
            f"Only exact payments are accepted."
        )

    return (
        f"Insufficient amount. ${outcome.requested_amount} does not cover the "
        f"oldest outstanding obligation, which requires ${outcome.required_amount}."
    )
