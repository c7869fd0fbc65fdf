from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import enforce, require_premium_member
from nagoyameshi.auth.guards import check_ownership
from nagoyameshi.auth.principal import Member
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.pagination import paginate
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import Reservation
from nagoyameshi.routers.restaurants import get_restaurant_or_404
from nagoyameshi.services.lifecycle import (
    MAX_PARTY,
    MIN_PARTY,
    ReservationIn,
    create_reservation,
    delete_reservation,
    reservation_command,
)
from nagoyameshi.services.restaurants import restaurant_to_dict

router = APIRouter(tags=["reservations"])

RESERVATIONS_URL = "/reservations"
PER_PAGE = 15


def reservation_to_dict(r: Reservation) -> dict:
    return {
        "id": r.id,
        "reserved_datetime": r.reserved_datetime.strftime("%Y-%m-%d %H:%M"),
        "number_of_people": r.number_of_people,
        "restaurant_id": r.restaurant_id,
        "restaurant_name": r.restaurant.name if r.restaurant else None,
        "user_id": r.user_id,
    }


@router.get("/reservations")
def index(
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    stmt = (
        select(Reservation)
        .where(Reservation.user_id == member.id)
        .order_by(Reservation.reserved_datetime.desc(), Reservation.id.desc())
    )
    result = paginate(db, stmt, page=page, per_page=PER_PAGE)
    return {"reservations": result.to_dict([reservation_to_dict(r) for r in result.items])}


@router.get("/restaurants/{restaurant_id}/reservations/create")
def create(
    restaurant_id: int,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    return {
        "restaurant": restaurant_to_dict(restaurant),
        "number_of_people": {"min": MIN_PARTY, "max": MAX_PARTY},
    }


@router.post("/restaurants/{restaurant_id}/reservations")
def store(
    restaurant_id: int,
    payload: ReservationIn,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    create_reservation(db, reservation_command(member, restaurant, payload))
    return redirect(RESERVATIONS_URL, flash=MessageCode.RESERVATION_CREATED)


@router.delete("/reservations/{reservation_id}")
def destroy(
    reservation_id: int,
    request: Request,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    reservation = db.get(Reservation, reservation_id)
    if reservation is None:
        raise HTTPException(status_code=404, detail="Reservation not found")

    enforce(check_ownership(member, reservation, fallback=RESERVATIONS_URL), request=request, principal=member)
    delete_reservation(db, reservation)
    return redirect(RESERVATIONS_URL, flash=MessageCode.RESERVATION_CANCELED)
