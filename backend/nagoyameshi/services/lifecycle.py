"""Create/update/delete rules for member-owned resources.

Payload models validate input (a failure becomes a 422 with per-field
errors and nothing is written). Ownership is checked by the caller with
auth.guards.check_ownership before any update or delete reaches here.
Reservations take no capacity or overlap check: any party size in range is
accepted regardless of other bookings.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from nagoyameshi.auth.principal import Member
from nagoyameshi.models import Favorite, Reservation, Restaurant, Review

log = logging.getLogger("nagoyameshi.lifecycle")

MIN_PARTY = 1
MAX_PARTY = 50
MIN_SCORE = 1
MAX_SCORE = 5

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME_RE = re.compile(r"\d{2}:\d{2}")


# ---------- Reservations ----------

class ReservationIn(BaseModel):
    reservation_date: date
    reservation_time: time
    number_of_people: int = Field(..., ge=MIN_PARTY, le=MAX_PARTY)

    @field_validator("reservation_date", mode="before")
    @classmethod
    def _date_format(cls, v):
        # zero padded, e.g. 2024-01-05
        if not isinstance(v, str) or not _DATE_RE.fullmatch(v.strip()):
            raise ValueError("reservation_date must be a YYYY-MM-DD string")
        return datetime.strptime(v.strip(), "%Y-%m-%d").date()

    @field_validator("reservation_time", mode="before")
    @classmethod
    def _time_format(cls, v):
        if not isinstance(v, str) or not _TIME_RE.fullmatch(v.strip()):
            raise ValueError("reservation_time must be a HH:MM string")
        return datetime.strptime(v.strip(), "%H:%M").time()


@dataclass(frozen=True)
class CreateReservation:
    restaurant_id: int
    member_id: int
    reserved_at: datetime
    number_of_people: int


def reservation_command(member: Member, restaurant: Restaurant, payload: ReservationIn) -> CreateReservation:
    return CreateReservation(
        restaurant_id=restaurant.id,
        member_id=member.id,
        reserved_at=datetime.combine(payload.reservation_date, payload.reservation_time),
        number_of_people=payload.number_of_people,
    )


def create_reservation(db: Session, cmd: CreateReservation) -> Reservation:
    reservation = Reservation(
        reserved_datetime=cmd.reserved_at,
        number_of_people=cmd.number_of_people,
        restaurant_id=cmd.restaurant_id,
        user_id=cmd.member_id,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    log.info("reservation created id=%s user_id=%s restaurant_id=%s", reservation.id, cmd.member_id, cmd.restaurant_id)
    return reservation


def delete_reservation(db: Session, reservation: Reservation) -> None:
    # cancellation is deletion; there is no cut-off time
    reservation_id, user_id = reservation.id, reservation.user_id
    db.delete(reservation)
    db.commit()
    log.info("reservation deleted id=%s user_id=%s", reservation_id, user_id)


# ---------- Reviews ----------

class ReviewIn(BaseModel):
    score: float = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be empty")
        return v


def create_review(db: Session, member: Member, restaurant: Restaurant, payload: ReviewIn) -> Review:
    review = Review(
        score=payload.score,
        content=payload.content,
        restaurant_id=restaurant.id,
        user_id=member.id,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def update_review(db: Session, review: Review, payload: ReviewIn) -> Review:
    # user_id and restaurant_id stay as created
    review.score = payload.score
    review.content = payload.content
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review: Review) -> None:
    db.delete(review)
    db.commit()


# ---------- Favorites ----------

def _favorite(db: Session, *, user_id: int, restaurant_id: int) -> Favorite | None:
    return db.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.restaurant_id == restaurant_id)
    ).scalar_one_or_none()


def add_favorite(db: Session, member: Member, restaurant: Restaurant) -> bool:
    """Idempotent. Returns False when the favorite already existed."""
    if _favorite(db, user_id=member.id, restaurant_id=restaurant.id) is not None:
        return False
    db.add(Favorite(user_id=member.id, restaurant_id=restaurant.id))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent add won the unique constraint
        db.rollback()
        return False
    return True


def remove_favorite(db: Session, member: Member, restaurant: Restaurant) -> bool:
    """Scoped to the member's own row. Removing a missing favorite is a no-op."""
    fav = _favorite(db, user_id=member.id, restaurant_id=restaurant.id)
    if fav is None:
        return False
    db.delete(fav)
    db.commit()
    return True
