"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation

from lifesync.domain.errors import ValidationError

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def normalize_decimal_input(value: str) -> str:
    """
    Normalize an amount typed by a user: decimal comma becomes a dot

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.strip().replace(",", ".")


def parse_amount(value, max_decimal_places: int = 2) -> Decimal:
    """
    Parse a signed money amount (Decimal, int or string with dot/comma).

    Raises:
        ValidationError: not a number, or too many decimal places

    Example:
        >>> parse_amount("-12,5")
        Decimal("-12.5")
        >>> parse_amount("1.005")
        ValidationError: At most 2 decimal places
    """
    if isinstance(value, bool):
        raise ValidationError("Invalid amount")
    if isinstance(value, float):
        value = repr(value)
    if isinstance(value, str):
        value = normalize_decimal_input(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid amount: {value!r}") from None
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")

    exponent = amount.as_tuple().exponent
    if exponent < 0 and -exponent > max_decimal_places:
        # 12.50 is fine, 12.505 is not
        if amount != amount.quantize(Decimal(1).scaleb(-max_decimal_places)):
            raise ValidationError(f"At most {max_decimal_places} decimal places")
    return amount


def normalize_currency(code: str) -> str:
    """ISO-4217 style three-letter code, upper-cased"""
    code = (code or "").strip().upper()
    if not _CURRENCY_RE.match(code):
        raise ValidationError(f"Invalid currency: {code!r}")
    return code
