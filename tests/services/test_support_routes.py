"""Support routes — abuse reports, contact requests and daily tips."""

from kringp.models import DailyTip


async def _report(client, headers, reported, reported_type="INFLUENCER", **extra):
    body = {"reported_user_id": str(reported.id), "reported_type": reported_type}
    body.update(extra)
    return await client.post("/api/v1/reports", headers=headers, json=body)


async def test_report_user(client, make_user):
    reporter, headers = await make_user(type="BUSINESS", name="Acme")
    reported, _ = await make_user(name="Spammer")

    res = await _report(client, headers, reported, reason="Fake followers")

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["reported_type"] == "INFLUENCER"
    assert data["reason"] == "Fake followers"
    assert data["reported_by"]["name"] == "Acme"
    assert data["reported_user"]["name"] == "Spammer"


async def test_cannot_report_yourself(client, make_user):
    user, headers = await make_user()
    res = await _report(client, headers, user)
    assert res.status_code == 400
    assert res.json()["message"] == "You cannot report yourself"


async def test_report_rejects_unknown_type_and_user(client, make_user):
    _, headers = await make_user()
    other, _ = await make_user()

    bad_type = await _report(client, headers, other, reported_type="ADMIN")
    assert bad_type.status_code == 400

    res = await client.post("/api/v1/reports", headers=headers, json={
        "reported_user_id": "00000000-0000-0000-0000-000000000001",
        "reported_type": "BUSINESS",
    })
    assert res.status_code == 404


async def test_report_listing_is_admin_only(client, make_user):
    _, admin_headers = await make_user(type="ADMIN")
    _, headers = await make_user(type="BUSINESS")
    influencer, _ = await make_user()
    group_admin, _ = await make_user()
    await _report(client, headers, influencer)
    await _report(client, headers, group_admin, reported_type="GROUP")

    denied = await client.get("/api/v1/reports", headers=headers)
    assert denied.status_code == 403

    everything = (await client.get("/api/v1/reports", headers=admin_headers)).json()["data"]
    groups = (await client.get(
        "/api/v1/reports?reported_type=GROUP", headers=admin_headers,
    )).json()["data"]
    assert everything["pagination"]["total"] == 2
    assert [r["reported_user"]["id"] for r in groups["reports"]] == [str(group_admin.id)]


async def test_single_report_visible_to_reporter_and_admin(client, make_user):
    _, admin_headers = await make_user(type="ADMIN")
    _, headers = await make_user(type="BUSINESS")
    reported, reported_headers = await make_user()
    report = (await _report(client, headers, reported)).json()["data"]
    url = f"/api/v1/reports/{report['id']}"

    assert (await client.get(url, headers=headers)).status_code == 200
    assert (await client.get(url, headers=admin_headers)).status_code == 200
    assert (await client.get(url, headers=reported_headers)).status_code == 403


async def test_contact_request_defaults_to_account_details(client, make_user):
    user, headers = await make_user(name="Asha")

    res = await client.post("/api/v1/contact", headers=headers, json={
        "title": "Payout delayed", "description": "My withdrawal is pending",
    })

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["name"] == "Asha"
    assert data["email_address"] == user.email_address
    assert data["user_id"] == str(user.id)


async def test_contact_request_needs_title_and_description(client, make_user):
    _, headers = await make_user()
    res = await client.post("/api/v1/contact", headers=headers, json={
        "title": "   ", "description": "Something",
    })
    assert res.status_code == 400


async def test_contact_requests_admin_list_and_delete(client, make_user):
    _, admin_headers = await make_user(type="ADMIN")
    _, headers = await make_user()
    created = (await client.post("/api/v1/contact", headers=headers, json={
        "title": "Help", "description": "Need help",
    })).json()["data"]

    assert (await client.get("/api/v1/contact", headers=headers)).status_code == 403
    listing = (await client.get("/api/v1/contact", headers=admin_headers)).json()["data"]
    assert [c["id"] for c in listing["contact_requests"]] == [created["id"]]

    deleted = await client.delete(f"/api/v1/contact/{created['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    listing = (await client.get("/api/v1/contact", headers=admin_headers)).json()["data"]
    assert listing["pagination"]["total"] == 0


async def test_tips_are_managed_by_admins(client, make_user):
    _, admin_headers = await make_user(type="ADMIN")
    _, headers = await make_user()
    body = {"title": "Post at 7pm", "description": "Engagement peaks in the evening"}

    denied = await client.post("/api/v1/tips", headers=headers, json=body)
    assert denied.status_code == 403

    created = await client.post("/api/v1/tips", headers=admin_headers, json=body)
    assert created.status_code == 201
    tip = created.json()["data"]
    assert tip["status"] is True

    updated = await client.patch(
        f"/api/v1/tips/{tip['id']}", headers=admin_headers, json={"title": "Post at 8pm"},
    )
    assert updated.json()["data"]["title"] == "Post at 8pm"
    assert updated.json()["data"]["description"] == body["description"]

    fetched = await client.get(f"/api/v1/tips/{tip['id']}")
    assert fetched.json()["data"]["title"] == "Post at 8pm"

    deleted = await client.delete(f"/api/v1/tips/{tip['id']}", headers=admin_headers)
    assert deleted.status_code == 200
    assert (await client.get(f"/api/v1/tips/{tip['id']}")).status_code == 404


async def test_tip_listing_hides_inactive(client, test_db):
    test_db.add_all([
        DailyTip(title="Live tip", status=True),
        DailyTip(title="Retired tip", status=False),
    ])
    await test_db.commit()

    active = (await client.get("/api/v1/tips")).json()["data"]
    every = (await client.get("/api/v1/tips?include_inactive=true")).json()["data"]

    assert [t["title"] for t in active["tips"]] == ["Live tip"]
    assert every["pagination"]["total"] == 2
