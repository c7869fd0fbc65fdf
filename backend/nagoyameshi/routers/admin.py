from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import require_admin
from nagoyameshi.auth.principal import Administrator
from nagoyameshi.core.config import settings
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.pagination import paginate
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import Category, Company, Reservation, Restaurant, Term, User
from nagoyameshi.routers.home import company_to_dict, first_company, oldest_term, term_to_dict
from nagoyameshi.services.billing import count_premium_members, is_premium
from nagoyameshi.services.members import search_members, user_to_dict

log = logging.getLogger("nagoyameshi.admin")

router = APIRouter(prefix="/admin", tags=["admin"])

CATEGORIES_PER_PAGE = 15


# ---------- Schemas ----------

class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v


class CompanyIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    postal_code: str = Field(..., pattern=r"^\d{7}$")
    address: str = Field(..., min_length=1, max_length=255)
    representative: str = Field(..., min_length=1, max_length=255)
    establishment_date: str = Field(..., min_length=1, max_length=255)
    capital: str = Field(..., min_length=1, max_length=255)
    business: str = Field(..., min_length=1, max_length=255)
    number_of_employees: str = Field(..., min_length=1, max_length=255)


class TermIn(BaseModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be empty")
        return v


# ---------- Home ----------

@router.get("/home")
def home(
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    total_members = db.scalar(select(func.count(User.id))) or 0
    premium_members = count_premium_members(db)

    return {
        "total_members": total_members,
        "total_premium_members": premium_members,
        "total_free_members": total_members - premium_members,
        "total_restaurants": db.scalar(select(func.count(Restaurant.id))) or 0,
        "total_reservations": db.scalar(select(func.count(Reservation.id))) or 0,
        "sales_for_this_month": premium_members * settings.PREMIUM_PLAN_MONTHLY_PRICE,
    }


# ---------- Users ----------

@router.get("/users")
def users_index(
    keyword: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    result = search_members(db, keyword=keyword, page=page)
    return {
        "keyword": keyword,
        "users": result.to_dict([user_to_dict(u) for u in result.items]),
        "total": result.total,
    }


@router.get("/users/{user_id}")
def users_show(
    user_id: int,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": user_to_dict(user), "premium": is_premium(db, user.id)}


# ---------- Categories ----------

def _category_or_404(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/categories")
def categories_index(
    keyword: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    stmt = select(Category).order_by(Category.id.asc())
    if keyword and keyword.strip():
        stmt = stmt.where(Category.name.ilike(f"%{keyword.strip()}%"))
    result = paginate(db, stmt, page=page, per_page=CATEGORIES_PER_PAGE)
    return {
        "keyword": keyword,
        "categories": result.to_dict([{"id": c.id, "name": c.name} for c in result.items]),
        "total": result.total,
    }


@router.post("/categories")
def categories_store(
    payload: CategoryIn,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    category = Category(name=payload.name)
    db.add(category)
    db.commit()
    log.info("category created id=%s admin_id=%s", category.id, admin.id)
    return redirect("/admin/categories", flash=MessageCode.CATEGORY_CREATED)


@router.patch("/categories/{category_id}")
def categories_update(
    category_id: int,
    payload: CategoryIn,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    category = _category_or_404(db, category_id)
    category.name = payload.name
    db.commit()
    return redirect("/admin/categories", flash=MessageCode.CATEGORY_UPDATED)


@router.delete("/categories/{category_id}")
def categories_destroy(
    category_id: int,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    category = _category_or_404(db, category_id)
    # drops the category_restaurant rows as well
    db.delete(category)
    db.commit()
    log.info("category deleted id=%s admin_id=%s", category_id, admin.id)
    return redirect("/admin/categories", flash=MessageCode.CATEGORY_DELETED)


# ---------- Company ----------

@router.get("/company")
def company_index(
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    return {"company": company_to_dict(first_company(db))}


@router.get("/company/edit")
def company_edit(
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    return {"company": company_to_dict(first_company(db))}


@router.patch("/company")
def company_update(
    payload: CompanyIn,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    company = first_company(db)
    if company is None:
        company = Company()
        db.add(company)

    for key, value in payload.model_dump().items():
        setattr(company, key, value)
    db.commit()
    return redirect("/admin/company", flash=MessageCode.COMPANY_UPDATED)


# ---------- Terms ----------

@router.get("/terms")
def terms_index(
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    return {"term": term_to_dict(oldest_term(db))}


@router.get("/terms/edit")
def terms_edit(
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    return {"term": term_to_dict(oldest_term(db))}


@router.patch("/terms")
def terms_update(
    payload: TermIn,
    db: Session = Depends(get_db),
    admin: Administrator = Depends(require_admin),
):
    term = oldest_term(db)
    if term is None:
        term = Term(content=payload.content)
        db.add(term)
    else:
        term.content = payload.content
    db.commit()
    return redirect("/admin/terms", flash=MessageCode.TERMS_UPDATED)
