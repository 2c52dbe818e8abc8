"""
Bidder deposit verification

Mock $1 refundable card hold that unlocks bidding on every item of an
auction. Card data is validated and discarded; only the last four digits
are kept for display.
"""
import logging
import re
from dataclasses import dataclass

from bidwell.services.errors import VerificationError

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


@dataclass
class DepositForm:
    name: str = ""
    email: str = ""
    card_number: str = ""
    expiry: str = ""
    cvc: str = ""
    agreed: bool = False


@dataclass(frozen=True)
class VerificationResult:
    name: str
    email: str
    card_last4: str


class VerificationService:
    """Validates the deposit form"""

    @staticmethod
    def verify_deposit(form: DepositForm) -> VerificationResult:
        """
        Validate the deposit form

        Raises:
            VerificationError: with a message per failing field
        """
        errors = {}

        name = (form.name or "").strip()
        if len(name) <= 1:
            errors["name"] = "Enter your full name"

        email = (form.email or "").strip()
        if "@" not in email:
            errors["email"] = "Enter a valid email"

        card_digits = _NON_DIGITS.sub("", form.card_number or "")[:16]
        if len(card_digits) < 15:
            errors["cardNumber"] = "Card number is too short"

        expiry_digits = _NON_DIGITS.sub("", form.expiry or "")[:4]
        if len(expiry_digits) < 4 or not 1 <= int(expiry_digits[:2] or 0) <= 12:
            errors["expiry"] = "Use MM/YY"

        cvc = _NON_DIGITS.sub("", form.cvc or "")
        if not 3 <= len(cvc) <= 4:
            errors["cvc"] = "CVC must be 3 or 4 digits"

        if not form.agreed:
            errors["agreed"] = "You must agree to the $1 refundable hold"

        if errors:
            raise VerificationError("Deposit verification failed", fields=errors)

        logger.info("Bidder deposit verified")
        return VerificationResult(name=name, email=email, card_last4=card_digits[-4:])
