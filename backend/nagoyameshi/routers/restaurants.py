from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import member_site
from nagoyameshi.auth.principal import Principal
from nagoyameshi.core.db import get_db
from nagoyameshi.models import Category, Restaurant
from nagoyameshi.services.restaurants import (
    DEFAULT_SORT,
    SORTS,
    rating_summary,
    restaurant_to_dict,
    restaurants_to_dicts,
    search_restaurants,
)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


def get_restaurant_or_404(db: Session, restaurant_id: int) -> Restaurant:
    restaurant = db.get(Restaurant, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant


@router.get("")
def list_restaurants(
    keyword: str | None = Query(default=None),
    category_id: int | None = Query(default=None),
    price: int | None = Query(default=None, ge=0),
    select_sort: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    principal: Principal = Depends(member_site),
):
    result = search_restaurants(
        db,
        keyword=keyword,
        category_id=category_id,
        price=price,
        sort=select_sort,
        page=page,
    )
    categories = db.scalars(select(Category).order_by(Category.id.asc())).all()

    return {
        "keyword": keyword,
        "category_id": category_id,
        "price": price,
        "sorts": SORTS,
        "sorted": select_sort if select_sort in SORTS.values() else DEFAULT_SORT,
        "restaurants": result.to_dict(restaurants_to_dicts(db, result.items)),
        "categories": [{"id": c.id, "name": c.name} for c in categories],
        "total": result.total,
    }


@router.get("/{restaurant_id}")
def show_restaurant(
    restaurant_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(member_site),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    rating = rating_summary(db, [restaurant.id]).get(restaurant.id)
    return {"restaurant": restaurant_to_dict(restaurant, rating)}
