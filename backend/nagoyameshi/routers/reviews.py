from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import enforce, require_member, require_premium_member
from nagoyameshi.auth.guards import check_ownership
from nagoyameshi.auth.principal import Member
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.pagination import paginate
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import Restaurant, Review
from nagoyameshi.routers.restaurants import get_restaurant_or_404
from nagoyameshi.services.billing import is_premium
from nagoyameshi.services.lifecycle import ReviewIn, create_review, delete_review, update_review
from nagoyameshi.services.restaurants import restaurant_to_dict

router = APIRouter(prefix="/restaurants/{restaurant_id}/reviews", tags=["reviews"])

FREE_VISIBLE = 3
PER_PAGE = 5


def reviews_url(restaurant_id: int) -> str:
    return f"/restaurants/{restaurant_id}/reviews"


def review_to_dict(r: Review) -> dict:
    return {
        "id": r.id,
        "score": r.score,
        "content": r.content,
        "restaurant_id": r.restaurant_id,
        "user_id": r.user_id,
        "user_name": r.user.name if r.user else None,
        "created_at": r.created_at.isoformat() if r.created_at else None,
        "updated_at": r.updated_at.isoformat() if r.updated_at else None,
    }


def _owned_review(request: Request, db: Session, member: Member, restaurant: Restaurant, review_id: int) -> Review:
    review = db.get(Review, review_id)
    if review is None or review.restaurant_id != restaurant.id:
        raise HTTPException(status_code=404, detail="Review not found")
    enforce(
        check_ownership(member, review, fallback=reviews_url(restaurant.id)),
        request=request,
        principal=member,
    )
    return review


@router.get("")
def index(
    restaurant_id: int,
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    member: Member = Depends(require_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    stmt = (
        select(Review)
        .where(Review.restaurant_id == restaurant.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )

    premium = is_premium(db, member.id)
    if premium:
        result = paginate(db, stmt, page=page, per_page=PER_PAGE)
        reviews = result.to_dict([review_to_dict(r) for r in result.items])
    else:
        # free members only get a preview of the latest few
        latest = db.scalars(stmt.limit(FREE_VISIBLE)).all()
        reviews = {"data": [review_to_dict(r) for r in latest]}

    return {
        "restaurant": restaurant_to_dict(restaurant),
        "premium": premium,
        "reviews": reviews,
    }


@router.get("/create")
def create(
    restaurant_id: int,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    return {"restaurant": restaurant_to_dict(restaurant)}


@router.post("")
def store(
    restaurant_id: int,
    payload: ReviewIn,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    create_review(db, member, restaurant, payload)
    return redirect(reviews_url(restaurant.id), flash=MessageCode.REVIEW_CREATED)


@router.get("/{review_id}/edit")
def edit(
    restaurant_id: int,
    review_id: int,
    request: Request,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    review = _owned_review(request, db, member, restaurant, review_id)
    return {"restaurant": restaurant_to_dict(restaurant), "review": review_to_dict(review)}


@router.patch("/{review_id}")
def update(
    restaurant_id: int,
    review_id: int,
    payload: ReviewIn,
    request: Request,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    review = _owned_review(request, db, member, restaurant, review_id)
    update_review(db, review, payload)
    return redirect(reviews_url(restaurant.id), flash=MessageCode.REVIEW_UPDATED)


@router.delete("/{review_id}")
def destroy(
    restaurant_id: int,
    review_id: int,
    request: Request,
    db: Session = Depends(get_db),
    member: Member = Depends(require_premium_member),
):
    restaurant = get_restaurant_or_404(db, restaurant_id)
    review = _owned_review(request, db, member, restaurant, review_id)
    delete_review(db, review)
    return redirect(reviews_url(restaurant.id), flash=MessageCode.REVIEW_DELETED)
