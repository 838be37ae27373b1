import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ecoflight.calc_core.engines import analyze
from ecoflight.calc_core.errors import InvalidFlightRecord
from ecoflight.calc_core.models import CarbonPricing
from ecoflight.services.api.core.config import settings
from ecoflight.services.api.core.fourfly import get_fourfly
from ecoflight.services.api.routers.auth import get_current_scope, raise_http
from ecoflight.services.api.schemas.carbon import CarbonAnalysisOut
from ecoflight.services.fourfly.client import FourFlyClient
from ecoflight.services.fourfly.errors import FourFlyError
from ecoflight.services.fourfly.models import ClubScope

logger = logging.getLogger(__name__)

router = APIRouter()


def current_pricing() -> CarbonPricing:
    return CarbonPricing(
        price_per_tonne=settings.OFFSET_PRICE_PER_TONNE,
        default_emission_factor=settings.DEFAULT_EMISSION_FACTOR,
    )


@router.get("/carbon-analysis", response_model=CarbonAnalysisOut)
async def carbon_analysis(
    scope: Annotated[ClubScope, Depends(get_current_scope)],
    fourfly: Annotated[FourFlyClient, Depends(get_fourfly)],
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
    start_date: date | None = None,
    end_date: date | None = None,
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date doit précéder end_date")

    try:
        flights = await fourfly.fetch_flights(
            scope,
            limit=limit or settings.FLIGHT_FETCH_LIMIT,
            offset=offset,
            start_date=start_date,
            end_date=end_date,
        )
        result = analyze(flights, pricing=current_pricing(), display_limit=settings.FLIGHT_DISPLAY_LIMIT)
    except FourFlyError as e:
        raise_http(e)
    except InvalidFlightRecord as e:
        logger.warning("Club %s: unanalyzable flight record: %s", scope.club_id, e)
        raise HTTPException(status_code=422, detail=f"Vol invalide: {e}") from e

    await fourfly.log_app_usage(scope, settings.APP_ID, "carbon_analysis")
    logger.info(
        "Carbon analysis | club=%s flights=%d total_co2=%.1f kg",
        scope.club_id, result.stats.total_flights, result.stats.total_co2,
    )
    return CarbonAnalysisOut(success=True, user=scope.to_public_dict(), **result.to_dict())


@router.get("/aircraft")
async def list_aircraft(
    scope: Annotated[ClubScope, Depends(get_current_scope)],
    fourfly: Annotated[FourFlyClient, Depends(get_fourfly)],
):
    try:
        return await fourfly.fetch_aircraft(scope)
    except FourFlyError as e:
        raise_http(e)


@router.get("/members")
async def list_members(
    scope: Annotated[ClubScope, Depends(get_current_scope)],
    fourfly: Annotated[FourFlyClient, Depends(get_fourfly)],
):
    try:
        return await fourfly.fetch_members(scope)
    except FourFlyError as e:
        raise_http(e)
