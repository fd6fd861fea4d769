"""Health probes, app settings and dashboards."""

import logging
from decimal import Decimal

import kringp.infrastructure.database as db_module
from kringp.models import AppSetting


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json() == {
        "status": True,
        "message": "Service is healthy",
        "data": {"service": "kringp-api", "version": "1.0.0"},
    }


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["data"] == {"database": "healthy"}


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["status"] is False


async def test_unknown_route_is_404(client):
    res = await client.get("/api/v1/nope")
    assert res.status_code == 404


async def test_settings_crud(client, make_user):
    _, admin = await make_user(type="ADMIN")

    created = await client.post(
        "/api/v1/app-settings", headers=admin, json={"slug": "banner-title", "value": "Hi"},
    )
    duplicate = await client.post(
        "/api/v1/app-settings", headers=admin, json={"slug": "banner-title", "value": "Yo"},
    )
    bad_slug = await client.post(
        "/api/v1/app-settings", headers=admin, json={"slug": "Banner Title"},
    )

    assert created.status_code == 201
    assert duplicate.status_code == 409
    assert bad_slug.status_code == 400

    fetched = await client.get("/api/v1/app-settings/banner-title")
    assert fetched.json()["data"]["value"] == "Hi"

    updated = await client.patch(
        f"/api/v1/app-settings/{created.json()['data']['id']}", headers=admin,
        json={"value": "Hello"},
    )
    assert updated.json()["data"]["value"] == "Hello"


async def test_settings_writes_require_admin(client, make_user):
    _, headers = await make_user()
    res = await client.post("/api/v1/app-settings", headers=headers, json={"slug": "x"})
    assert res.status_code == 403


async def test_dashboard_banner_and_top_influencers(client, make_user, test_db):
    star, _ = await make_user(name="Five Star")
    star.ratings = Decimal("5")
    test_db.add(AppSetting(slug="banner-title", value="Summer drops"))
    await test_db.commit()
    _, headers = await make_user(type="BUSINESS")

    res = await client.get("/api/v1/dashboard", headers=headers)

    data = res.json()["data"]
    assert data["banner"]["banner-title"] == "Summer drops"
    assert data["banner"]["banner-image"] is None
    assert [i["name"] for i in data["top_influencers"]] == ["Five Star"]


async def test_admin_overview_counts_users(client, make_user):
    _, admin = await make_user(type="ADMIN")
    await make_user()
    await make_user(type="BUSINESS")

    res = await client.get("/api/v1/dashboard/admin", headers=admin)

    data = res.json()["data"]
    assert data["users"] == {"INFLUENCER": 1, "BUSINESS": 1, "ADMIN": 1}
    assert data["orders"] == []
    assert data["platform_earnings"] == 0


async def test_requests_are_access_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="kringp.access"):
        await client.get("/api/v1/badges")
        await client.get("/api/v1/health/")

    records = [r for r in caplog.records if r.name == "kringp.access"]
    assert [(r.method, r.path, r.status_code) for r in records] == [
        ("GET", "/api/v1/badges", 200),
    ]
