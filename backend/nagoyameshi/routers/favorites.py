from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import require_premium_member
from nagoyameshi.auth.principal import Member
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.pagination import paginate
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import Favorite, Restaurant
from nagoyameshi.routers.restaurants import get_restaurant_or_404
from nagoyameshi.services.lifecycle import add_favorite, remove_favorite
from nagoyameshi.services.restaurants import restaurants_to_dicts

router = APIRouter(prefix="/favorites", tags=["favorites"])

PER_PAGE = 15


@router.get("")
def index(
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    # most recently favorited first
    stmt = (
        select(Restaurant)
        .join(Favorite, Favorite.restaurant_id == Restaurant.id)
        .where(Favorite.user_id == member.id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )
    result = paginate(db, stmt, page=page, per_page=PER_PAGE)
    return {"favorite_restaurants": result.to_dict(restaurants_to_dicts(db, result.items))}


@router.post("/{restaurant_id}")
def store(
    restaurant_id: int,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    add_favorite(db, member, restaurant)
    return redirect(f"/restaurants/{restaurant.id}", flash=MessageCode.FAVORITE_ADDED)


@router.delete("/{restaurant_id}")
def destroy(
    restaurant_id: int,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    remove_favorite(db, member, restaurant)
    return redirect(f"/restaurants/{restaurant.id}", flash=MessageCode.FAVORITE_REMOVED)
