from nagoyameshi.core.responses import FLASH_COOKIE
from nagoyameshi.models import Favorite


def test_guest_cannot_favorite(client, db, restaurant):
    r = client.post(f"/favorites/{restaurant.id}")
    assert r.status_code == 302
    assert r.headers["location"] == "/login"
    assert db.query(Favorite).count() == 0


def test_free_member_cannot_favorite(client, db, member, restaurant, login_as):
    login_as(member)
    r = client.post(f"/favorites/{restaurant.id}")
    assert r.headers["location"] == "/subscription/create"
    assert db.query(Favorite).count() == 0


def test_admin_cannot_favorite(client, db, admin, restaurant, login_as):
    login_as(admin)
    r = client.post(f"/favorites/{restaurant.id}")
    assert r.headers["location"] == "/admin/home"
    assert db.query(Favorite).count() == 0


def test_premium_member_adds_and_removes(client, db, premium_member, restaurant, login_as):
    login_as(premium_member)

    r = client.post(f"/favorites/{restaurant.id}")
    assert r.status_code == 302
    assert r.headers["location"] == f"/restaurants/{restaurant.id}"
    assert r.cookies.get(FLASH_COOKIE) == "favorite_added"
    assert db.query(Favorite).filter(Favorite.user_id == premium_member.id).count() == 1

    # second add changes nothing
    assert client.post(f"/favorites/{restaurant.id}").status_code == 302
    assert db.query(Favorite).count() == 1

    r = client.delete(f"/favorites/{restaurant.id}")
    assert r.status_code == 302
    assert r.cookies.get(FLASH_COOKIE) == "favorite_removed"
    assert db.query(Favorite).count() == 0

    # removing again is a no-op
    assert client.delete(f"/favorites/{restaurant.id}").status_code == 302


def test_missing_restaurant(client, premium_member, login_as):
    login_as(premium_member)
    assert client.post("/favorites/999").status_code == 404
    assert client.delete("/favorites/999").status_code == 404


def test_index_lists_own_favorites(client, db, make_premium_member, make_restaurant, login_as):
    me, other = make_premium_member(), make_premium_member()
    mine, theirs = make_restaurant(), make_restaurant()
    db.add_all([Favorite(user_id=me.id, restaurant_id=mine.id), Favorite(user_id=other.id, restaurant_id=theirs.id)])
    db.commit()
    login_as(me)

    r = client.get("/favorites")
    assert r.status_code == 200
    page = r.json()["favorite_restaurants"]
    assert [x["id"] for x in page["data"]] == [mine.id]
    assert page["total"] == 1
