"""
Pydantic schemas for currencies.
"""
from pydantic import BaseModel
from settleup.services.currency_service import Currency


class CurrencyResponse(BaseModel):
    """Schema for a supported currency."""
    currency: Currency
    code: str
    symbol: str
    display_name: str
    rate_to_reference: float  # 1 unit = rate USD


class ConversionResponse(BaseModel):
    """Schema for a conversion result."""
    amount: float
    from_currency: Currency
    to_currency: Currency
    converted_amount: float
    formatted: str
