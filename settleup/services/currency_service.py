"""
Currency service for static currency conversion.
"""
import enum
import logging

logger = logging.getLogger(__name__)


class Currency(str, enum.Enum):
    """Supported fiat currencies."""
    USD = "usd"
    EUR = "eur"
    GBP = "gbp"
    JPY = "jpy"
    INR = "inr"
    CAD = "cad"
    AUD = "aud"
    CHF = "chf"

    @property
    def code(self) -> str:
        """ISO 4217 code (upper case)."""
        return self.value.upper()

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS[self]

    @property
    def display_name(self) -> str:
        return CURRENCY_NAMES[self]

    @property
    def rate_to_reference(self) -> float:
        """Value of one unit of this currency in US dollars."""
        return RATES_TO_REFERENCE[self]

    @classmethod
    def from_code(cls, code: str) -> "Currency":
        """
        Resolve an ISO code case-insensitively.
        Unknown codes fall back to USD.
        """
        try:
            return cls((code or "").strip().lower())
        except ValueError:
            logger.warning(f"Unknown currency code {code!r}, falling back to USD")
            return cls.USD


# Static rates, 1 unit of currency = rate USD
RATES_TO_REFERENCE = {
    Currency.USD: 1.0,
    Currency.EUR: 1.08,
    Currency.GBP: 1.25,
    Currency.JPY: 0.0068,
    Currency.INR: 0.012,
    Currency.CAD: 0.74,
    Currency.AUD: 0.66,
    Currency.CHF: 1.12,
}

CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.JPY: "¥",
    Currency.INR: "₹",
    Currency.CAD: "$",
    Currency.AUD: "$",
    Currency.CHF: "CHF",
}

CURRENCY_NAMES = {
    Currency.USD: "US Dollar",
    Currency.EUR: "Euro",
    Currency.GBP: "British Pound",
    Currency.JPY: "Japanese Yen",
    Currency.INR: "Indian Rupee",
    Currency.CAD: "Canadian Dollar",
    Currency.AUD: "Australian Dollar",
    Currency.CHF: "Swiss Franc",
}


def convert(amount: float, from_currency: Currency, to_currency: Currency) -> float:
    """
    Convert amount between currencies through the reference unit (USD).

    Args:
        amount: Amount in the source currency
        from_currency: Source currency
        to_currency: Target currency

    Returns:
        Amount in the target currency
    """
    if from_currency == to_currency:
        return amount
    return amount * from_currency.rate_to_reference / to_currency.rate_to_reference


def format_amount(amount: float, currency: Currency) -> str:
    """Format an amount with the currency symbol, e.g. "$12.50"."""
    return f"{currency.symbol}{amount:.2f}"
