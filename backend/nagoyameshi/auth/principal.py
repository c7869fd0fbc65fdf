"""Who is making the request.

Exactly one of these is resolved per request. Members and administrators
come from different tables, so `Member(id=1)` and `Administrator(id=1)`
are unrelated people.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Guest:
    pass


@dataclass(frozen=True)
class Member:
    id: int
    email: str


@dataclass(frozen=True)
class Administrator:
    id: int
    email: str


Principal = Union[Guest, Member, Administrator]

GUEST = Guest()
