"""
Jinja2 templates and small helpers shared by the HTML routes
"""
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from bidwell.core.timeutils import format_cents, time_remaining
from bidwell.models import MAX_AMOUNT_CENTS
from bidwell.services.errors import InvalidBidError

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["cents"] = format_cents
templates.env.globals["time_remaining"] = time_remaining


def redirect(path: str, **params) -> RedirectResponse:
    """303 redirect; None-valued params are dropped"""
    query = urlencode({k: v for k, v in params.items() if v is not None})
    return RedirectResponse(f"{path}?{query}" if query else path, status_code=303)


def safe_next(target: Optional[str], default: str) -> str:
    """Only same-site relative paths are followed after login; //host and /\\host are off-site"""
    if target and target.startswith("/") and target[1:2] not in ("/", "\\"):
        return target
    return default


def dollars_to_cents(value: Optional[str], field: str = "amount") -> int:
    """'55' -> 5500, '55.25' -> 5525; '$1,250' is accepted"""
    cleaned = (value or "").replace("$", "").replace(",", "").strip()
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidBidError("Enter an amount in dollars", fields={field: "must be a number"})
    if not amount.is_finite():
        raise InvalidBidError("Enter an amount in dollars", fields={field: "must be a number"})

    # Bound checked before scaling: 1e999999999 * 100 overflows the decimal context
    if abs(amount) > Decimal(MAX_AMOUNT_CENTS) / 100:
        raise InvalidBidError(
            f"Amounts are limited to {format_cents(MAX_AMOUNT_CENTS)}", fields={field: "too large"}
        )

    cents = amount * 100
    if cents != cents.to_integral_value():
        raise InvalidBidError("Amounts are limited to whole cents", fields={field: "too many decimals"})
    return int(cents)
