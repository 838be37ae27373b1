import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ecoflight.calc_core.engines import calculate_offset_cost
from ecoflight.services.api.core.config import settings
from ecoflight.services.api.db.models import OffsetAcknowledgment
from ecoflight.services.api.db.session import get_db
from ecoflight.services.api.routers.auth import get_current_scope
from ecoflight.services.api.schemas.offsets import OffsetCreate, OffsetOut, OffsetSummaryOut
from ecoflight.services.fourfly.models import ClubScope

logger = logging.getLogger(__name__)

router = APIRouter()


def _out(x: OffsetAcknowledgment) -> OffsetOut:
    return OffsetOut(
        id=x.id,
        club_id=x.club_id,
        user_id=x.user_id,
        flight_id=x.flight_id,
        co2_kg=x.co2_kg,
        offset_cost=x.offset_cost,
        price_per_tonne=x.price_per_tonne,
        note=x.note,
        created_at=x.created_at.isoformat(),
    )


@router.post("", response_model=OffsetOut, status_code=201)
def create_offset(
    data: OffsetCreate,
    scope: Annotated[ClubScope, Depends(get_current_scope)],
    db=Depends(get_db),
):
    price = settings.OFFSET_PRICE_PER_TONNE
    ack = OffsetAcknowledgment(
        club_id=str(scope.club_id),
        user_id=str(scope.user_id),
        flight_id=data.flight_id,
        co2_kg=data.co2_kg,
        offset_cost=calculate_offset_cost(data.co2_kg, price),
        price_per_tonne=price,
        note=data.note or "",
    )
    db.add(ack)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail="Compensation déjà enregistrée pour ce vol") from e
    db.refresh(ack)
    logger.info("Offset acknowledged | club=%s flight=%s co2=%.1f kg", ack.club_id, ack.flight_id, ack.co2_kg)
    return _out(ack)


@router.get("", response_model=list[OffsetOut])
def list_offsets(
    scope: Annotated[ClubScope, Depends(get_current_scope)],
    db=Depends(get_db),
):
    q = (
        select(OffsetAcknowledgment)
        .where(OffsetAcknowledgment.club_id == str(scope.club_id))
        .order_by(OffsetAcknowledgment.created_at.desc(), OffsetAcknowledgment.id.desc())
    )
    return [_out(x) for x in db.execute(q).scalars().all()]


@router.get("/summary", response_model=OffsetSummaryOut)
def offsets_summary(
    scope: Annotated[ClubScope, Depends(get_current_scope)],
    db=Depends(get_db),
):
    count, total_co2, total_cost = db.execute(
        select(
            func.count(OffsetAcknowledgment.id),
            func.coalesce(func.sum(OffsetAcknowledgment.co2_kg), 0.0),
            func.coalesce(func.sum(OffsetAcknowledgment.offset_cost), 0.0),
        ).where(OffsetAcknowledgment.club_id == str(scope.club_id))
    ).one()
    return OffsetSummaryOut(count=count, total_co2=float(total_co2), total_offset_cost=float(total_cost))
