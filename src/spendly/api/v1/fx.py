"""Exchange rate endpoints."""

from datetime import date, datetime, timezone
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from spendly.api.deps import get_current_user_id, get_rate_resolver
from spendly.core.currencies import CURRENCIES, normalize_currency
from spendly.fx.resolver import RateResolver
from spendly.schemas.fx import (
    ConversionResponse,
    CurrencyResponse,
    RateResponse,
    RefreshScheduledResponse,
)

router = APIRouter(prefix="/fx", tags=["fx"])

CURRENCY_CODE_PATTERN = r"^[A-Za-z]{3}$"


@router.get(
    "/rate",
    response_model=RateResponse,
    summary="Get an exchange rate",
    description="""
    Rate such that `amount_in_to = amount_in_from * rate`.

    With **date**, the most recent rate stored on that day is returned when
    one exists; otherwise (or without **date**) the live rate is resolved
    through cache, stored rates, the provider and the static table.
    """,
)
async def get_exchange_rate(
    from_currency: Annotated[str, Query(alias="from", pattern=CURRENCY_CODE_PATTERN)],
    to_currency: Annotated[str, Query(alias="to", pattern=CURRENCY_CODE_PATTERN)],
    on: Annotated[date | None, Query(alias="date", description="Historical day (YYYY-MM-DD)")] = None,
    current_user_id: UUID = Depends(get_current_user_id),
    resolver: RateResolver = Depends(get_rate_resolver),
) -> RateResponse:
    base = normalize_currency(from_currency)
    target = normalize_currency(to_currency)

    if on is not None:
        historical = await resolver.resolve_historical_rate(base, target, on)
        if historical is not None:
            return RateResponse(
                from_currency=base,
                to_currency=target,
                rate=historical,
                as_of=on,
                historical=True,
            )

    rate = await resolver.resolve_rate(base, target)
    return RateResponse(
        from_currency=base,
        to_currency=target,
        rate=rate,
        as_of=datetime.now(timezone.utc),
    )


@router.get(
    "/convert",
    response_model=ConversionResponse,
    summary="Convert an amount",
)
async def convert_amount(
    amount: Annotated[float, Query(ge=0, description="Amount in the source currency")],
    from_currency: Annotated[str, Query(alias="from", pattern=CURRENCY_CODE_PATTERN)],
    to_currency: Annotated[str, Query(alias="to", pattern=CURRENCY_CODE_PATTERN)],
    current_user_id: UUID = Depends(get_current_user_id),
    resolver: RateResolver = Depends(get_rate_resolver),
) -> ConversionResponse:
    conversion = await resolver.convert(amount, from_currency, to_currency)
    return ConversionResponse(
        from_currency=conversion.base,
        to_currency=conversion.target,
        amount=conversion.amount,
        rate=conversion.rate,
        converted=conversion.converted,
    )


@router.get(
    "/currencies",
    response_model=list[CurrencyResponse],
    summary="List supported currencies",
)
async def list_currencies(
    current_user_id: UUID = Depends(get_current_user_id),
) -> list[CurrencyResponse]:
    return [CurrencyResponse(**currency) for currency in CURRENCIES]


@router.post(
    "/refresh",
    response_model=RefreshScheduledResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Trigger a bulk rate refresh",
    description="""
    Schedules one bulk fetch from the rate provider. New rates are stored
    and the in-memory rate cache is cleared. Failures are logged only.
    """,
)
async def trigger_refresh(
    background_tasks: BackgroundTasks,
    current_user_id: UUID = Depends(get_current_user_id),
    resolver: RateResolver = Depends(get_rate_resolver),
) -> RefreshScheduledResponse:
    background_tasks.add_task(resolver.refresh_all_rates)
    return RefreshScheduledResponse()
