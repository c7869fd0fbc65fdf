"""Create/update/delete rules for reservations, reviews and favorites."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from nagoyameshi.auth.principal import Member
from nagoyameshi.models import Favorite, Reservation, Review
from nagoyameshi.services import lifecycle
from nagoyameshi.services.lifecycle import (
    ReservationIn,
    ReviewIn,
    add_favorite,
    create_reservation,
    create_review,
    remove_favorite,
    reservation_command,
    update_review,
)


def as_principal(user) -> Member:
    return Member(id=user.id, email=user.email)


# ---------- Reservation payloads ----------

@pytest.mark.parametrize("people", [1, 10, 50])
def test_reservation_party_size_in_range(people):
    payload = ReservationIn(reservation_date="2024-01-01", reservation_time="00:00", number_of_people=people)
    assert payload.number_of_people == people


@pytest.mark.parametrize("people", [0, -1, 51, 100])
def test_reservation_party_size_out_of_range(people):
    with pytest.raises(ValidationError):
        ReservationIn(reservation_date="2024-01-01", reservation_time="00:00", number_of_people=people)


@pytest.mark.parametrize(
    "reservation_date,reservation_time",
    [
        ("2024-13-01", "12:00"),
        ("2024-02-30", "12:00"),
        ("20240101", "12:00"),
        ("", "12:00"),
        ("2024-01-01", "25:00"),
        ("2024-01-01", "12:60"),
        ("2024-01-01", "noon"),
        ("2024-1-1", "12:00"),
        ("2024-01-01", "9:5"),
        ("2024-01-01", "9:05"),
        ("2024-01-01", "12:00:00"),
    ],
)
def test_reservation_malformed_date_or_time(reservation_date, reservation_time):
    with pytest.raises(ValidationError):
        ReservationIn(
            reservation_date=reservation_date,
            reservation_time=reservation_time,
            number_of_people=2,
        )


def test_reservation_command_combines_date_and_time(member, restaurant):
    payload = ReservationIn(reservation_date="2024-01-01", reservation_time="00:00", number_of_people=10)
    cmd = reservation_command(as_principal(member), restaurant, payload)

    assert cmd.reserved_at == datetime(2024, 1, 1, 0, 0)
    assert cmd.member_id == member.id
    assert cmd.restaurant_id == restaurant.id
    assert cmd.number_of_people == 10


def test_same_slot_can_be_booked_twice(db, member, make_member, restaurant):
    # no capacity or overlap check
    other = make_member()
    payload = ReservationIn(reservation_date="2024-01-01", reservation_time="19:00", number_of_people=50)

    create_reservation(db, reservation_command(as_principal(member), restaurant, payload))
    create_reservation(db, reservation_command(as_principal(other), restaurant, payload))

    assert db.query(Reservation).filter(Reservation.restaurant_id == restaurant.id).count() == 2


# ---------- Review payloads ----------

@pytest.mark.parametrize("score", [1, 1.0, 3, 4.5, 5, "3.5"])
def test_review_score_in_range(score):
    assert ReviewIn(score=score, content="テスト").score == float(score)


@pytest.mark.parametrize("score", [0, 0.9, 5.1, 6, -1, "five"])
def test_review_score_out_of_range(score):
    with pytest.raises(ValidationError):
        ReviewIn(score=score, content="テスト")


@pytest.mark.parametrize("content", ["", "   "])
def test_review_content_required(content):
    with pytest.raises(ValidationError):
        ReviewIn(score=3, content=content)


def test_member_may_review_same_restaurant_twice(db, member, restaurant):
    principal = as_principal(member)
    create_review(db, principal, restaurant, ReviewIn(score=5, content="一回目"))
    create_review(db, principal, restaurant, ReviewIn(score=4, content="二回目"))

    assert db.query(Review).filter(Review.user_id == member.id).count() == 2


def test_update_review_keeps_owner_and_restaurant(db, member, restaurant):
    review = create_review(db, as_principal(member), restaurant, ReviewIn(score=2, content="before"))
    update_review(db, review, ReviewIn(score=5, content="after"))

    assert (review.score, review.content) == (5, "after")
    assert review.user_id == member.id
    assert review.restaurant_id == restaurant.id


# ---------- Favorites ----------

def test_add_favorite_is_idempotent(db, member, restaurant):
    principal = as_principal(member)
    assert add_favorite(db, principal, restaurant) is True
    assert add_favorite(db, principal, restaurant) is False
    assert db.query(Favorite).filter(Favorite.user_id == member.id).count() == 1


def test_remove_missing_favorite_is_a_noop(db, member, restaurant):
    assert remove_favorite(db, as_principal(member), restaurant) is False


def test_remove_favorite_only_touches_own_row(db, member, make_member, restaurant):
    other = make_member()
    add_favorite(db, as_principal(member), restaurant)
    add_favorite(db, as_principal(other), restaurant)

    assert remove_favorite(db, as_principal(member), restaurant) is True
    remaining = db.query(Favorite).filter(Favorite.restaurant_id == restaurant.id).all()
    assert [f.user_id for f in remaining] == [other.id]


def test_add_favorite_losing_the_unique_race_is_not_an_error(db, member, restaurant, monkeypatch):
    principal = as_principal(member)
    assert add_favorite(db, principal, restaurant) is True

    # the existence check misses a row another request just committed
    monkeypatch.setattr(lifecycle, "_favorite", lambda *args, **kwargs: None)

    assert add_favorite(db, principal, restaurant) is False
    assert db.query(Favorite).filter(Favorite.user_id == member.id).count() == 1
