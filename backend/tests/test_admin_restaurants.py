from datetime import datetime

from nagoyameshi.core.responses import FLASH_COOKIE
from nagoyameshi.models import Favorite, Reservation, Restaurant, Review
from nagoyameshi.models.associations import category_restaurant, regular_holiday_restaurant

PAYLOAD = {
    "name": "テスト",
    "description": "テスト",
    "lowest_price": 1000,
    "highest_price": 5000,
    "postal_code": "0000000",
    "address": "テスト",
    "opening_time": "10:00",
    "closing_time": "20:00",
    "seating_capacity": 50,
}


def join_rows(db, table, restaurant_id: int) -> int:
    return len(db.execute(table.select().where(table.c.restaurant_id == restaurant_id)).fetchall())


def test_store_with_categories_and_holidays(client, db, admin, category, holidays, login_as):
    login_as(admin)

    r = client.post(
        "/admin/restaurants",
        json={**PAYLOAD, "category_ids": [category.id], "regular_holiday_ids": [h.id for h in holidays]},
    )
    assert r.status_code == 302
    assert r.headers["location"] == "/admin/restaurants"
    assert r.cookies.get(FLASH_COOKIE) == "restaurant_created"

    restaurant = db.query(Restaurant).one()
    assert [c.id for c in restaurant.categories] == [category.id]
    assert {h.day for h in restaurant.regular_holidays} == {"月曜日", "火曜日"}


def test_unknown_category_writes_nothing(client, db, admin, login_as):
    login_as(admin)
    r = client.post("/admin/restaurants", json={**PAYLOAD, "category_ids": [999]})
    assert r.status_code == 422
    assert db.query(Restaurant).count() == 0


def test_price_and_hours_are_validated(client, db, admin, login_as):
    login_as(admin)
    assert client.post("/admin/restaurants", json={**PAYLOAD, "lowest_price": 6000}).status_code == 422
    assert client.post("/admin/restaurants", json={**PAYLOAD, "opening_time": "21:00"}).status_code == 422
    assert client.post("/admin/restaurants", json={**PAYLOAD, "postal_code": "123"}).status_code == 422
    assert client.post("/admin/restaurants", json={**PAYLOAD, "seating_capacity": -1}).status_code == 422
    assert db.query(Restaurant).count() == 0


def test_update_replaces_associations(client, db, admin, restaurant, category, holidays, login_as):
    restaurant.categories = [category]
    restaurant.regular_holidays = list(holidays)
    db.commit()
    login_as(admin)

    r = client.patch(
        f"/admin/restaurants/{restaurant.id}",
        json={**PAYLOAD, "name": "更新後", "category_ids": [], "regular_holiday_ids": [holidays[0].id]},
    )
    assert r.status_code == 302
    assert r.headers["location"] == f"/admin/restaurants/{restaurant.id}"

    db.refresh(restaurant)
    assert restaurant.name == "更新後"
    assert restaurant.categories == []
    assert [h.id for h in restaurant.regular_holidays] == [holidays[0].id]


def test_failed_update_keeps_previous_associations(client, db, admin, restaurant, category, login_as):
    restaurant.categories = [category]
    db.commit()
    login_as(admin)

    r = client.patch(
        f"/admin/restaurants/{restaurant.id}",
        json={**PAYLOAD, "name": "更新後", "category_ids": [category.id, 999]},
    )
    assert r.status_code == 422

    db.refresh(restaurant)
    assert restaurant.name != "更新後"
    assert [c.id for c in restaurant.categories] == [category.id]


def test_destroy_leaves_no_orphans(client, db, admin, restaurant, category, holidays, member, login_as):
    restaurant.categories = [category]
    restaurant.regular_holidays = list(holidays)
    db.add_all([
        Review(score=3, content="x", restaurant_id=restaurant.id, user_id=member.id),
        Favorite(restaurant_id=restaurant.id, user_id=member.id),
        Reservation(
            reserved_datetime=datetime(2024, 1, 1, 19),
            number_of_people=2,
            restaurant_id=restaurant.id,
            user_id=member.id,
        ),
    ])
    db.commit()
    restaurant_id = restaurant.id
    login_as(admin)

    r = client.delete(f"/admin/restaurants/{restaurant_id}")
    assert r.status_code == 302
    assert r.cookies.get(FLASH_COOKIE) == "restaurant_deleted"

    assert db.get(Restaurant, restaurant_id) is None
    assert join_rows(db, category_restaurant, restaurant_id) == 0
    assert join_rows(db, regular_holiday_restaurant, restaurant_id) == 0
    assert db.query(Review).count() == 0
    assert db.query(Favorite).count() == 0
    assert db.query(Reservation).count() == 0


def test_show_edit_and_create_pages(client, admin, restaurant, category, holidays, login_as):
    login_as(admin)
    assert client.get(f"/admin/restaurants/{restaurant.id}").json()["restaurant"]["id"] == restaurant.id

    edit = client.get(f"/admin/restaurants/{restaurant.id}/edit").json()
    assert [c["id"] for c in edit["categories"]] == [category.id]
    assert len(client.get("/admin/restaurants/create").json()["regular_holidays"]) == 2
    assert client.get("/admin/restaurants/999").status_code == 404


def test_index_keyword(client, admin, make_restaurant, login_as):
    target = make_restaurant(name="ひつまぶし屋")
    make_restaurant(name="きしめん亭")
    login_as(admin)

    r = client.get("/admin/restaurants", params={"keyword": "ひつまぶし"})
    assert [x["id"] for x in r.json()["restaurants"]["data"]] == [target.id]
