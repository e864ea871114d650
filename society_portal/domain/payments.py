"""Payment recording for maintenance bills"""

import random
from datetime import date
from typing import Optional

from society_portal.domain.exceptions import BillAlreadyPaidError
from society_portal.domain.models import BillStatus, Payment
from society_portal.utils import date_utils

DEFAULT_ADMIN_METHOD = "Manual"
DEFAULT_MEMBER_METHOD = "Online"


def generate_receipt_number(prefix: str = "RC", rng: Optional[random.Random] = None) -> str:
    """
    Cosmetic receipt code: prefix plus a random zero-padded 3-digit number.

    Not unique. Never use it as a key.
    """
    rng = rng or random
    return f"{prefix}{rng.randrange(1000):03d}"


def settle_bill(
    status: BillStatus,
    payment_method: str,
    receipt_number: Optional[str] = None,
    paid_on: Optional[date] = None,
    receipt_prefix: str = "RC",
) -> Payment:
    """
    Validate a payment against a bill's current status and build its settlement.

    Pending and overdue bills can be paid; a paid bill is left untouched.

    Raises:
        BillAlreadyPaidError: If the bill is already paid
    """
    if status == BillStatus.PAID:
        raise BillAlreadyPaidError("Bill has already been paid")

    return Payment(
        payment_date=paid_on or date_utils.today(),
        payment_method=payment_method,
        receipt_number=receipt_number or generate_receipt_number(receipt_prefix),
    )
