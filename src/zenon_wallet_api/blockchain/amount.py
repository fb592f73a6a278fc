# src/zenon_wallet_api/blockchain/amount.py
from decimal import MAX_EMAX, MIN_EMIN, Decimal, DecimalException, InvalidOperation, localcontext
from typing import Union

from ..exceptions import InvalidArgument

AmountInput = Union[str, int, float, Decimal]

# 2**256 - 1 has 78 decimal digits
MAX_SCALED_DIGITS = 78

def _to_decimal(amount: AmountInput) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidArgument(f"Invalid amount '{amount}'")
    if isinstance(amount, float):
        # repr of a float is its shortest round-tripping decimal form
        amount = repr(amount)
    try:
        value = Decimal(amount.strip() if isinstance(amount, str) else amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidArgument(f"Invalid amount '{amount}'")
    if not value.is_finite():
        raise InvalidArgument(f"Invalid amount '{amount}'")
    return value

def extract_decimals(amount: AmountInput, decimals: int) -> int:
    """Convert a decimal amount into the token's smallest integer unit.

    The conversion is exact: an amount with more fractional digits than
    ``decimals`` allows, or a negative amount, is rejected with
    InvalidArgument rather than rounded.
    """
    value = _to_decimal(amount)
    if value < 0:
        raise InvalidArgument(f"Amount must not be negative, got '{amount}'")

    if value and value.adjusted() + decimals >= MAX_SCALED_DIGITS:
        raise InvalidArgument(f"Amount '{amount}' is too large")

    digits = len(value.as_tuple().digits)
    try:
        with localcontext() as ctx:
            ctx.prec = digits + decimals + 2
            ctx.Emax = MAX_EMAX
            ctx.Emin = MIN_EMIN
            scaled = value.scaleb(decimals)
            exact = scaled == scaled.to_integral_value()
    except DecimalException as e:
        raise InvalidArgument(f"Invalid amount '{amount}': {e.__class__.__name__}")
    if not exact:
        raise InvalidArgument(
            f"Amount '{amount}' exceeds the token precision of {decimals} decimals"
        )
    return int(scaled)

scale = extract_decimals

def add_decimals(amount: int, decimals: int) -> str:
    """Format an integer base-unit amount as a decimal string"""
    with localcontext() as ctx:
        ctx.prec = len(str(abs(amount))) + decimals + 2
        value = Decimal(amount).scaleb(-decimals).normalize()
    return format(value, 'f')
