from __future__ import annotations

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from nagoyameshi.core.pagination import Page, paginate
from nagoyameshi.models.category import Category
from nagoyameshi.models.regular_holiday import RegularHoliday
from nagoyameshi.models.reservation import Reservation
from nagoyameshi.models.restaurant import Restaurant
from nagoyameshi.models.review import Review

PER_PAGE = 15

# label shown in the UI -> sort key accepted in ?select_sort=
SORTS = {
    "掲載日が新しい順": "created_at desc",
    "価格が安い順": "lowest_price asc",
    "評価が高い順": "rating desc",
    "予約数が多い順": "popular desc",
}
DEFAULT_SORT = "created_at desc"


class UnknownReferenceError(ValueError):
    def __init__(self, field: str, ids: list[int]):
        super().__init__(f"unknown {field}: {ids}")
        self.field = field
        self.ids = ids


def _ratings_subquery():
    return (
        select(Review.restaurant_id, func.avg(Review.score).label("rating"))
        .group_by(Review.restaurant_id)
        .subquery()
    )


def _popularity_subquery():
    return (
        select(Reservation.restaurant_id, func.count(Reservation.id).label("popular"))
        .group_by(Reservation.restaurant_id)
        .subquery()
    )


def _apply_sort(stmt: Select, sort: str | None) -> Select:
    sort = sort if sort in SORTS.values() else DEFAULT_SORT

    if sort == "lowest_price asc":
        order = Restaurant.lowest_price.asc()
    elif sort == "rating desc":
        sub = _ratings_subquery()
        stmt = stmt.outerjoin(sub, sub.c.restaurant_id == Restaurant.id)
        order = func.coalesce(sub.c.rating, 0).desc()
    elif sort == "popular desc":
        sub = _popularity_subquery()
        stmt = stmt.outerjoin(sub, sub.c.restaurant_id == Restaurant.id)
        order = func.coalesce(sub.c.popular, 0).desc()
    else:
        order = Restaurant.created_at.desc()

    # ties: newest listing first, then id for a stable page boundary
    return stmt.order_by(order, Restaurant.created_at.desc(), Restaurant.id.desc())


def search_restaurants(
    db: Session,
    *,
    keyword: str | None = None,
    category_id: int | None = None,
    price: int | None = None,
    sort: str | None = None,
    page: int = 1,
) -> Page:
    """Member listing. Only one filter applies: keyword, else category, else price."""
    stmt = select(Restaurant)

    keyword = (keyword or "").strip()
    if keyword:
        like = f"%{keyword}%"
        stmt = stmt.where(
            or_(
                Restaurant.name.ilike(like),
                Restaurant.address.ilike(like),
                Restaurant.categories.any(Category.name.ilike(like)),
            )
        )
    elif category_id:
        stmt = stmt.where(Restaurant.categories.any(Category.id == category_id))
    elif price:
        stmt = stmt.where(Restaurant.lowest_price <= price)

    return paginate(db, _apply_sort(stmt, sort), page=page, per_page=PER_PAGE)


def admin_search_restaurants(db: Session, *, keyword: str | None = None, page: int = 1) -> Page:
    stmt = select(Restaurant).order_by(Restaurant.id.asc())
    if keyword:
        stmt = stmt.where(Restaurant.name.ilike(f"%{keyword.strip()}%"))
    return paginate(db, stmt, page=page, per_page=PER_PAGE)


def top_rated(db: Session, *, limit: int = 6) -> list[Restaurant]:
    stmt = _apply_sort(select(Restaurant), "rating desc").limit(limit)
    return list(db.scalars(stmt).all())


def newest(db: Session, *, limit: int = 6) -> list[Restaurant]:
    stmt = select(Restaurant).order_by(Restaurant.created_at.desc(), Restaurant.id.desc()).limit(limit)
    return list(db.scalars(stmt).all())


def rating_summary(db: Session, restaurant_ids: list[int]) -> dict[int, tuple[float | None, int]]:
    """restaurant_id -> (average score, number of reviews), one query for a whole page."""
    if not restaurant_ids:
        return {}
    rows = db.execute(
        select(Review.restaurant_id, func.avg(Review.score), func.count(Review.id))
        .where(Review.restaurant_id.in_(restaurant_ids))
        .group_by(Review.restaurant_id)
    ).all()
    return {int(rid): (round(float(avg), 2) if avg is not None else None, int(n)) for rid, avg, n in rows}


def _load_by_ids(db: Session, model, ids: list[int] | None, field: str) -> list:
    # drop empty values and duplicates, keep order
    wanted = list(dict.fromkeys(int(i) for i in (ids or []) if i))
    if not wanted:
        return []
    rows = db.scalars(select(model).where(model.id.in_(wanted))).all()
    found = {r.id: r for r in rows}
    missing = [i for i in wanted if i not in found]
    if missing:
        raise UnknownReferenceError(field, missing)
    return [found[i] for i in wanted]


def save_restaurant(
    db: Session,
    restaurant: Restaurant | None,
    *,
    fields: dict,
    category_ids: list[int] | None,
    regular_holiday_ids: list[int] | None,
) -> Restaurant:
    """Create or update a restaurant and replace its associations in one commit."""
    categories = _load_by_ids(db, Category, category_ids, "category_ids")
    holidays = _load_by_ids(db, RegularHoliday, regular_holiday_ids, "regular_holiday_ids")

    if restaurant is None:
        restaurant = Restaurant()
        db.add(restaurant)

    for key, value in fields.items():
        setattr(restaurant, key, value)
    restaurant.categories = categories
    restaurant.regular_holidays = holidays

    db.commit()
    db.refresh(restaurant)
    return restaurant


def delete_restaurant(db: Session, restaurant: Restaurant) -> None:
    # join rows, reviews, reservations and favorites go in the same transaction
    restaurant.categories = []
    restaurant.regular_holidays = []
    db.delete(restaurant)
    db.commit()


def restaurant_to_dict(r: Restaurant, rating: tuple[float | None, int] | None = None) -> dict:
    avg, count = rating or (None, 0)
    return {
        "id": r.id,
        "name": r.name,
        "image": r.image,
        "description": r.description,
        "lowest_price": r.lowest_price,
        "highest_price": r.highest_price,
        "postal_code": r.postal_code,
        "address": r.address,
        "opening_time": r.opening_time.strftime("%H:%M") if r.opening_time else None,
        "closing_time": r.closing_time.strftime("%H:%M") if r.closing_time else None,
        "seating_capacity": r.seating_capacity,
        "categories": [{"id": c.id, "name": c.name} for c in r.categories],
        "regular_holidays": [{"id": h.id, "day": h.day} for h in r.regular_holidays],
        "rating": avg,
        "reviews_count": count,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }


def restaurants_to_dicts(db: Session, restaurants: list[Restaurant]) -> list[dict]:
    ratings = rating_summary(db, [r.id for r in restaurants])
    return [restaurant_to_dict(r, ratings.get(r.id)) for r in restaurants]
