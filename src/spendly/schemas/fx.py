"""Pydantic schemas for exchange rate endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class RateResponse(BaseModel):
    """Conversion rate between two currencies."""

    from_currency: str = Field(serialization_alias="from", description="Base currency code")
    to_currency: str = Field(serialization_alias="to", description="Target currency code")
    rate: float = Field(description="amount_in_target = amount_in_base * rate")
    as_of: datetime | date = Field(
        serialization_alias="date", description="Requested day for stored rates, or now for live rates"
    )
    historical: bool = Field(
        default=False, description="True when the rate was stored on the requested day"
    )


class ConversionResponse(BaseModel):
    """Amount converted with the live rate."""

    from_currency: str = Field(serialization_alias="from")
    to_currency: str = Field(serialization_alias="to")
    amount: float
    rate: float
    converted: float = Field(description="amount * rate, rounded to 2 decimals")


class CurrencyResponse(BaseModel):
    """Supported currency."""

    code: str
    name: str
    symbol: str


class RefreshScheduledResponse(BaseModel):
    status: str = "scheduled"
