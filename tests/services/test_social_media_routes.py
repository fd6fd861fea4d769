"""Social media and badge routes — linked accounts and the badges they earn."""

from kringp.models import Badge


async def test_link_platform_hides_view_count(client, make_user):
    user, headers = await make_user()

    res = await client.post(
        "/api/v1/social-media", headers=headers,
        json={"platform": "INSTAGRAM", "user_name": "asha", "followers": 1200, "view_count": 900},
    )

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["platform"] == "INSTAGRAM"
    assert data["followers"] == 1200
    assert "view_count" not in data

    listing = await client.get(f"/api/v1/social-media/users/{user.id}")
    assert [p["user_name"] for p in listing.json()["data"]["platforms"]] == ["asha"]


async def test_same_platform_twice_conflicts(client, make_user):
    _, headers = await make_user()
    await client.post("/api/v1/social-media", headers=headers, json={"platform": "YOUTUBE"})

    res = await client.post("/api/v1/social-media", headers=headers, json={"platform": "YOUTUBE"})

    assert res.status_code == 409
    assert res.json()["message"] == "YOUTUBE account is already linked"


async def test_second_platform_awards_multi_platform_badge(client, make_user, test_db):
    test_db.add(Badge(type="1", title="Multi-platform"))
    await test_db.commit()
    _, headers = await make_user()

    first = await client.post("/api/v1/social-media", headers=headers, json={"platform": "INSTAGRAM"})
    second = await client.post("/api/v1/social-media", headers=headers, json={"platform": "YOUTUBE"})

    assert first.json()["data"]["badges_awarded"] == []
    assert second.json()["data"]["badges_awarded"] == ["1"]

    me = (await client.get("/api/v1/users/me", headers=headers)).json()["data"]
    assert [b["title"] for b in me["badges"]] == ["Multi-platform"]


async def test_update_metrics_only_by_owner(client, make_user):
    _, owner = await make_user()
    _, other = await make_user()
    linked = (await client.post(
        "/api/v1/social-media", headers=owner, json={"platform": "TWITTER"},
    )).json()["data"]

    denied = await client.patch(
        f"/api/v1/social-media/{linked['id']}", headers=other, json={"followers": 5},
    )
    assert denied.status_code == 403

    ok = await client.patch(
        f"/api/v1/social-media/{linked['id']}", headers=owner, json={"followers": 5000},
    )
    assert ok.json()["data"]["followers"] == 5000


async def test_badge_catalog_and_user_badges(client, make_user):
    _, admin = await make_user(type="ADMIN")
    user, headers = await make_user()

    created = await client.post(
        "/api/v1/badges", headers=admin, json={"type": "1", "title": "Multi-platform"},
    )
    duplicate = await client.post(
        "/api/v1/badges", headers=admin, json={"type": "1", "title": "Again"},
    )
    assert created.status_code == 201
    assert duplicate.status_code == 409

    for platform in ("INSTAGRAM", "FACEBOOK"):
        await client.post("/api/v1/social-media", headers=headers, json={"platform": platform})

    catalog = (await client.get("/api/v1/badges")).json()["data"]
    held = (await client.get(f"/api/v1/badges/users/{user.id}")).json()["data"]
    assert catalog["pagination"]["total"] == 1
    assert [b["type"] for b in held["badges"]] == ["1"]
