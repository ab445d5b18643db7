"""
Currency routes.
"""
from fastapi import APIRouter
from typing import List
from settleup.schemas.currency import CurrencyResponse, ConversionResponse
from settleup.services.currency_service import Currency, convert, format_amount

router = APIRouter(prefix="/currencies", tags=["currencies"])


@router.get("", response_model=List[CurrencyResponse])
async def list_currencies():
    """Get all supported currencies with their static rates."""
    return [
        CurrencyResponse(
            currency=currency,
            code=currency.code,
            symbol=currency.symbol,
            display_name=currency.display_name,
            rate_to_reference=currency.rate_to_reference
        )
        for currency in Currency
    ]


@router.get("/convert", response_model=ConversionResponse)
async def convert_amount(
    amount: float,
    from_currency: str = "usd",
    to_currency: str = "usd"
):
    """Convert an amount between two currencies (codes are case-insensitive)."""
    source = Currency.from_code(from_currency)
    target = Currency.from_code(to_currency)
    converted = convert(amount, source, target)
    return ConversionResponse(
        amount=amount,
        from_currency=source,
        to_currency=target,
        converted_amount=converted,
        formatted=format_amount(converted, target)
    )
