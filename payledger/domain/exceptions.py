"""
Typed exceptions for the obligation ledger.

Every error carries a machine-readable ``code`` and the structured data
callers need, so routes translate by type, never by message text.

    PayLedgerError
    +-- ObligationError
    |   +-- ObligationNotFoundError
    |   +-- SettledObligationError
    +-- PaymentError
    |   +-- InvalidPaymentAmountError
    |   +-- InconsistentOutcomeError
    +-- StoreError
        +-- ObligationStoreError
        +-- SettlementConflictError

Business rejections (excess / insufficient payment) are NOT exceptions;
they are outcome categories.
"""

from decimal import Decimal
from typing import Any, Sequence


class PayLedgerError(Exception):
    """Base class for all ledger errors"""

    code: str = "PAYLEDGER_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Obligations
# ---------------------------------------------------------------------------

class ObligationError(PayLedgerError):
    code = "OBLIGATION_ERROR"


class ObligationNotFoundError(ObligationError):
    code = "OBLIGATION_NOT_FOUND"

    def __init__(self, obligation_id: int):
        self.obligation_id = obligation_id
        super().__init__(f"Obligation {obligation_id} not found")


class SettledObligationError(ObligationError):
    """A settled obligation was asked to change"""

    code = "OBLIGATION_SETTLED"

    def __init__(self, obligation_id: int, action: str):
        self.obligation_id = obligation_id
        self.action = action
        super().__init__(f"Cannot {action} settled obligation {obligation_id}")


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

class PaymentError(PayLedgerError):
    code = "PAYMENT_ERROR"


class InvalidPaymentAmountError(PaymentError):
    code = "INVALID_PAYMENT_AMOUNT"

    def __init__(self, amount: Any):
        self.amount = amount
        super().__init__(f"Payment amount must be a positive decimal, got {amount!r}")


class InconsistentOutcomeError(PaymentError):
    """Outcome fits none of the reporting categories"""

    code = "INCONSISTENT_OUTCOME"

    def __init__(self, settled_count: int, remaining_amount: Decimal):
        self.settled_count = settled_count
        self.remaining_amount = remaining_amount
        super().__init__(
            f"Allocation outcome is inconsistent: settled={settled_count}, "
            f"remaining={remaining_amount}"
        )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class StoreError(PayLedgerError):
    code = "STORE_ERROR"


class ObligationStoreError(StoreError):
    """Reading or writing obligations failed"""

    code = "OBLIGATION_STORE_UNAVAILABLE"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Obligation store failed during {operation}")


class SettlementConflictError(StoreError):
    """Store confirmed fewer settlements than the allocation decided"""

    code = "SETTLEMENT_CONFLICT"

    def __init__(self, expected_ids: Sequence[int], confirmed: int):
        self.expected_ids = tuple(expected_ids)
        self.confirmed = confirmed
        super().__init__(
            f"Expected to settle {len(self.expected_ids)} obligation(s), "
            f"store confirmed {confirmed}; payment rolled back"
        )
