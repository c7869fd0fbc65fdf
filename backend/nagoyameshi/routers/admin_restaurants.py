from __future__ import annotations

import logging
from datetime import time

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy import select
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import require_admin
from nagoyameshi.auth.principal import Administrator
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import Category, RegularHoliday, Restaurant
from nagoyameshi.routers.restaurants import get_restaurant_or_404
from nagoyameshi.services.restaurants import (
    UnknownReferenceError,
    admin_search_restaurants,
    delete_restaurant,
    rating_summary,
    restaurant_to_dict,
    restaurants_to_dicts,
    save_restaurant,
)

log = logging.getLogger("nagoyameshi.admin.restaurants")

router = APIRouter(prefix="/admin/restaurants", tags=["admin-restaurants"])


class RestaurantIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    lowest_price: int = Field(..., ge=0)
    highest_price: int = Field(..., ge=0)
    postal_code: str = Field(..., pattern=r"^\d{7}$")
    address: str = Field(..., min_length=1, max_length=255)
    opening_time: time
    closing_time: time
    seating_capacity: int = Field(..., ge=0)
    category_ids: list[int] = Field(default_factory=list)
    regular_holiday_ids: list[int] = Field(default_factory=list)

    @field_validator("name", "description", "address")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @model_validator(mode="after")
    def _ranges(self):
        if self.lowest_price > self.highest_price:
            raise ValueError("lowest_price must not exceed highest_price")
        if self.opening_time >= self.closing_time:
            raise ValueError("opening_time must be before closing_time")
        return self

    def columns(self) -> dict:
        return self.model_dump(exclude={"category_ids", "regular_holiday_ids"})


def _choices(db: Session) -> dict:
    categories = db.scalars(select(Category).order_by(Category.id.asc())).all()
    holidays = db.scalars(select(RegularHoliday).order_by(RegularHoliday.id.asc())).all()
    return {
        "categories": [{"id": c.id, "name": c.name} for c in categories],
        "regular_holidays": [{"id": h.id, "day": h.day} for h in holidays],
    }


def _save(db: Session, restaurant: Restaurant | None, payload: RestaurantIn) -> Restaurant:
    try:
        return save_restaurant(
            db,
            restaurant,
            fields=payload.columns(),
            category_ids=payload.category_ids,
            regular_holiday_ids=payload.regular_holiday_ids,
        )
    except UnknownReferenceError as e:
        db.rollback()
        raise HTTPException(
            status_code=422,
            detail=[{"loc": ["body", e.field], "msg": f"unknown ids: {e.ids}"}],
        )


@router.get("")
def index(
    keyword: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    result = admin_search_restaurants(db, keyword=keyword, page=page)
    return {
        "keyword": keyword,
        "restaurants": result.to_dict(restaurants_to_dicts(db, result.items)),
        "total": result.total,
    }


@router.get("/create")
def create(
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    return _choices(db)


@router.post("")
def store(
    payload: RestaurantIn,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    restaurant = _save(db, None, payload)
    log.info("restaurant created id=%s admin_id=%s", restaurant.id, admin.id)
    return redirect("/admin/restaurants", flash=MessageCode.RESTAURANT_CREATED)


@router.get("/{restaurant_id}")
def show(
    restaurant_id: int,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    rating = rating_summary(db, [restaurant.id]).get(restaurant.id)
    return {"restaurant": restaurant_to_dict(restaurant, rating)}


@router.get("/{restaurant_id}/edit")
def edit(
    restaurant_id: int,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    return {"restaurant": restaurant_to_dict(restaurant), **_choices(db)}


@router.patch("/{restaurant_id}")
def update(
    restaurant_id: int,
    payload: RestaurantIn,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    _save(db, restaurant, payload)
    return redirect(f"/admin/restaurants/{restaurant_id}", flash=MessageCode.RESTAURANT_UPDATED)


@router.delete("/{restaurant_id}")
def destroy(
    restaurant_id: int,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    delete_restaurant(db, restaurant)
    log.info("restaurant deleted id=%s admin_id=%s", restaurant_id, admin.id)
    return redirect("/admin/restaurants", flash=MessageCode.RESTAURANT_DELETED)
