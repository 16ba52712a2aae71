"""Prices and the French way of showing them."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from domain.catalog import COVER_OPTIONS, PAPER_OPTIONS, price_of
from domain.models import OrderConfiguration


CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "CHF": "CHF", "CAD": "$CA"}

NBSP = "\u00a0"
NARROW_NBSP = "\u202f"

FRENCH_MONTHS = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)

CENT = Decimal("0.01")


def total_price(config: OrderConfiguration) -> Decimal:
    """Cover and paper add-ons times the quantity. The finish is free."""
    unit = price_of(COVER_OPTIONS, config.cover_type) + price_of(
        PAPER_OPTIONS, config.paper_type
    )
    return unit * config.quantity


def to_minor_units(total: Decimal) -> int:
    return int((total * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_price(amount: Decimal, currency: str = "EUR") -> str:
    """Render like `Intl.NumberFormat("fr-FR", {style: "currency"})`.

    Two decimals, a comma as decimal separator, a narrow no-break space
    between thousands and a no-break space before the symbol.
    """
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    grouped = f"{int(whole):,}".replace(",", NARROW_NBSP)
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{sign}{grouped},{fraction}{NBSP}{symbol}"


def format_minor_units(cents: int, currency: str = "EUR") -> str:
    return format_price(Decimal(cents) / 100, currency)


def format_date(value: datetime) -> str:
    return f"{value.day} {FRENCH_MONTHS[value.month - 1]} {value.year}"


def cover_label(cover_type: str | None) -> str:
    if cover_type == "hardcover":
        return "Couverture rigide"
    if cover_type == "softcover":
        return "Couverture souple"
    return cover_type or "—"
