from __future__ import annotations

import re
from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from nagoyameshi.auth.passwords import hash_password
from nagoyameshi.core.pagination import Page, paginate
from nagoyameshi.models import User

PER_PAGE = 15

_KANA_RE = re.compile(r"[ァ-ヴー\s]+")


class ProfileIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    kana: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    postal_code: str = Field(..., pattern=r"^\d{7}$")
    address: str = Field(..., min_length=1, max_length=255)
    phone_number: str = Field(..., pattern=r"^\d{10,11}$")
    birthday: date | None = None
    occupation: str | None = Field(default=None, max_length=255)

    @field_validator("kana")
    @classmethod
    def _katakana(cls, v: str) -> str:
        if not _KANA_RE.fullmatch(v):
            raise ValueError("kana must be full-width katakana")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def _lowercase(cls, v):
        # checked on the raw input; EmailStr normalizes the domain part
        if isinstance(v, str) and v != v.lower():
            raise ValueError("email must be lowercase")
        return v

    @field_validator("birthday", mode="before")
    @classmethod
    def _birthday_digits(cls, v):
        # 8 digits, e.g. 20150319
        if v is None or v == "":
            return None
        if not isinstance(v, str) or not re.fullmatch(r"\d{8}", v):
            raise ValueError("birthday must be 8 digits (YYYYMMDD)")
        return datetime.strptime(v, "%Y%m%d").date()

    @field_validator("occupation")
    @classmethod
    def _blank_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class RegisterIn(ProfileIn):
    password: str = Field(..., min_length=8, max_length=255)
    password_confirmation: str

    @model_validator(mode="after")
    def _confirmed(self):
        if self.password != self.password_confirmation:
            raise ValueError("password confirmation does not match")
        return self


class EmailTakenError(ValueError):
    pass


def email_taken(db: Session, email: str, *, exclude_user_id: int | None = None) -> bool:
    stmt = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    return db.execute(stmt).first() is not None


def _apply_profile(user: User, payload: ProfileIn) -> None:
    user.name = payload.name.strip()
    user.kana = payload.kana.strip()
    user.email = payload.email
    user.postal_code = payload.postal_code
    user.address = payload.address.strip()
    user.phone_number = payload.phone_number
    user.birthday = payload.birthday
    user.occupation = payload.occupation


def register_member(db: Session, payload: RegisterIn) -> User:
    if email_taken(db, payload.email):
        raise EmailTakenError(payload.email)

    user = User(password=hash_password(payload.password))
    _apply_profile(user, payload)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_profile(db: Session, user: User, payload: ProfileIn) -> User:
    if email_taken(db, payload.email, exclude_user_id=user.id):
        raise EmailTakenError(payload.email)

    _apply_profile(user, payload)
    db.commit()
    db.refresh(user)
    return user


def search_members(db: Session, *, keyword: str | None = None, page: int = 1) -> Page:
    stmt = select(User).order_by(User.id.asc())
    if keyword:
        like = f"%{keyword.strip()}%"
        stmt = stmt.where(or_(User.name.ilike(like), User.kana.ilike(like)))
    return paginate(db, stmt, page=page, per_page=PER_PAGE)


def user_to_dict(u: User) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "kana": u.kana,
        "email": u.email,
        "postal_code": u.postal_code,
        "address": u.address,
        "phone_number": u.phone_number,
        "birthday": u.birthday.strftime("%Y%m%d") if u.birthday else None,
        "occupation": u.occupation,
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }
