from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import member_site
from nagoyameshi.auth.principal import Member, Principal
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode, message_text
from nagoyameshi.models import Category, Company, Term
from nagoyameshi.services.restaurants import newest, restaurants_to_dicts, top_rated

router = APIRouter(tags=["home"])


def company_to_dict(c: Company | None) -> dict | None:
    if c is None:
        return None
    return {
        "id": c.id,
        "name": c.name,
        "postal_code": c.postal_code,
        "address": c.address,
        "representative": c.representative,
        "establishment_date": c.establishment_date,
        "capital": c.capital,
        "business": c.business,
        "number_of_employees": c.number_of_employees,
    }


def term_to_dict(t: Term | None) -> dict | None:
    if t is None:
        return None
    return {"id": t.id, "content": t.content}


def first_company(db: Session) -> Company | None:
    return db.execute(select(Company).order_by(Company.id.asc())).scalars().first()


def oldest_term(db: Session) -> Term | None:
    return db.execute(select(Term).order_by(Term.created_at.asc(), Term.id.asc())).scalars().first()


@router.get("/")
def home(
    db: Session = Depends(get_db),
    principal: Principal = Depends(member_site),
):
    categories = db.scalars(select(Category).order_by(Category.id.asc())).all()
    return {
        "logged_in": isinstance(principal, Member),
        "highly_rated_restaurants": restaurants_to_dicts(db, top_rated(db)),
        "new_restaurants": restaurants_to_dicts(db, newest(db)),
        "categories": [{"id": c.id, "name": c.name} for c in categories],
    }


@router.get("/company")
def company(
    db: Session = Depends(get_db),
    principal: Principal = Depends(member_site),
):
    return {"company": company_to_dict(first_company(db))}


@router.get("/terms")
def terms(
    db: Session = Depends(get_db),
    principal: Principal = Depends(member_site),
):
    return {"term": term_to_dict(oldest_term(db))}


@router.get("/messages")
def messages():
    # flash cookies carry codes; both realms render them with this table
    return {code.value: message_text(code) for code in MessageCode}
