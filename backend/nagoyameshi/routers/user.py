from __future__ import annotations

from operator import attrgetter

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from nagoyameshi.auth.deps import current_user, enforce, require_member
from nagoyameshi.auth.guards import check_ownership
from nagoyameshi.auth.principal import Member
from nagoyameshi.core.db import get_db
from nagoyameshi.core.messages import MessageCode
from nagoyameshi.core.responses import redirect
from nagoyameshi.models import User
from nagoyameshi.services.members import EmailTakenError, ProfileIn, update_profile, user_to_dict

router = APIRouter(prefix="/user", tags=["user"])

USER_HOME_URL = "/user"

# a member record is owned by itself
_self = attrgetter("id")


def _own_user_or_redirect(request: Request, db: Session, member: Member, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    enforce(check_ownership(member, user, fallback=USER_HOME_URL, owner_of=_self), request=request, principal=member)
    return user


@router.get("")
def show(
    db: Session = Depends(get_db),
    member: Member = Depends(require_member),
):
    return {"user": user_to_dict(current_user(db, member))}


@router.get("/{user_id}/edit")
def edit(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    member: Member = Depends(require_member),
):
    user = _own_user_or_redirect(request, db, member, user_id)
    return {"user": user_to_dict(user)}


@router.put("/{user_id}")
def update(
    user_id: int,
    payload: ProfileIn,
    request: Request,
    db: Session = Depends(get_db),
    member: Member = Depends(require_member),
):
    user = _own_user_or_redirect(request, db, member, user_id)
    try:
        update_profile(db, user, payload)
    except EmailTakenError:
        raise HTTPException(status_code=422, detail=[{"loc": ["body", "email"], "msg": "email already taken"}])
    return redirect(USER_HOME_URL, flash=MessageCode.PROFILE_UPDATED)
