"""Users & Auth routes — signup, login, single-session tokens, profiles and suspension.

Invariants:
    - Signup returns the profile with a generated referral code and a completion score
    - Only the most recently issued token authenticates; logout revokes it
    - A referral code credits the referrer with 50 locked coins
    - Suspended accounts cannot log in
"""

from uuid import uuid4

PASSWORD = "secret123"


def _signup_body(country, **overrides):
    body = {
        "email_address": "Creator@Mail.com",
        "password": PASSWORD,
        "type": "INFLUENCER",
        "name": "Nisha Rao",
        "country_id": str(country.id),
    }
    body.update(overrides)
    return body


async def test_signup_creates_profile(client, country):
    res = await client.post("/api/v1/users/signup", json=_signup_body(country))

    assert res.status_code == 201
    body = res.json()
    assert body["status"] is True
    data = body["data"]
    assert data["email_address"] == "creator@mail.com"
    assert data["referral_code"].startswith("NISH")
    assert data["country"]["name"] == "India"
    # type, name, email, password, country and default gender: 6 of 15
    assert data["profile_completion"] == 40
    assert "password" not in data


async def test_signup_rejects_duplicate_email(client, country):
    await client.post("/api/v1/users/signup", json=_signup_body(country))
    res = await client.post("/api/v1/users/signup", json=_signup_body(country))

    assert res.status_code == 409
    assert res.json()["status"] is False


async def test_signup_cannot_self_assign_admin(client, country):
    res = await client.post("/api/v1/users/signup", json=_signup_body(country, type="ADMIN"))
    assert res.status_code == 400
    assert res.json()["status"] is False


async def test_signup_with_unknown_country_is_404(client, country):
    res = await client.post(
        "/api/v1/users/signup", json=_signup_body(country, country_id=str(uuid4())),
    )
    assert res.status_code == 404


async def test_signup_with_referral_credits_referrer(client, country, make_user):
    referrer, headers = await make_user(name="Referrer")

    res = await client.post(
        "/api/v1/users/signup",
        json=_signup_body(country, referral_code=referrer.referral_code.lower()),
    )
    assert res.status_code == 201

    coins = (await client.get("/api/v1/wallet/coins", headers=headers)).json()["data"]
    assert coins["summary"]["total_amount"] == 50
    assert coins["summary"]["unlocked"] is False
    assert [h["type"] for h in coins["history"]] == ["REFERRAL"]


async def test_signup_with_unknown_referral_code_fails(client, country):
    res = await client.post(
        "/api/v1/users/signup", json=_signup_body(country, referral_code="NOPE0000"),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid referral code"


async def test_login_then_me(client, country):
    await client.post("/api/v1/users/signup", json=_signup_body(country))
    res = await client.post("/api/v1/users/login", json={
        "email_address": "creator@mail.com", "password": PASSWORD, "fcm_token": "abc",
    })

    assert res.status_code == 200
    token = res.json()["data"]["token"]
    me = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Nisha Rao"
    assert "Please select your state" in me.json()["data"]["suggestions"]


async def test_login_wrong_password_is_401(client, country):
    await client.post("/api/v1/users/signup", json=_signup_body(country))
    res = await client.post("/api/v1/users/login", json={
        "email_address": "creator@mail.com", "password": "wrong-password",
    })
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid password."


async def test_new_login_supersedes_old_token(client, make_user):
    user, old_headers = await make_user()
    res = await client.post("/api/v1/users/login", json={
        "email_address": user.email_address, "password": PASSWORD,
    })
    new_token = res.json()["data"]["token"]

    if new_token != old_headers["Authorization"].split()[1]:
        stale = await client.get("/api/v1/users/me", headers=old_headers)
        assert stale.status_code == 401
    fresh = await client.get(
        "/api/v1/users/me", headers={"Authorization": f"Bearer {new_token}"},
    )
    assert fresh.status_code == 200


async def test_logout_revokes_token(client, make_user):
    _, headers = await make_user()

    assert (await client.post("/api/v1/users/logout", headers=headers)).status_code == 200
    assert (await client.get("/api/v1/users/me", headers=headers)).status_code == 401


async def test_missing_token_is_401_and_garbage_token_is_403(client):
    assert (await client.get("/api/v1/users/me")).status_code == 401
    res = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 403


async def test_profile_update_recomputes_completion(client, make_user):
    user, headers = await make_user()
    res = await client.patch(f"/api/v1/users/{user.id}", headers=headers, json={
        "about_you": "Food and travel", "sample_work_link": "https://work.example.com",
    })

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["about_you"] == "Food and travel"
    # type, name, email, password, default gender, link, about: 7 of 15
    assert data["profile_completion"] == 47


async def test_profile_update_rejects_credentials(client, make_user):
    user, headers = await make_user()
    res = await client.patch(
        f"/api/v1/users/{user.id}", headers=headers, json={"password": "newpass123"},
    )
    assert res.status_code == 400


async def test_profile_update_cannot_clear_user_type(client, make_user):
    user, headers = await make_user()
    res = await client.patch(
        f"/api/v1/users/{user.id}", headers=headers, json={"type": None},
    )
    assert res.status_code == 400
    assert res.json()["status"] is False

    me = await client.get("/api/v1/users/me", headers=headers)
    assert me.json()["data"]["type"] == "INFLUENCER"


async def test_profile_update_accepts_null_for_nullable_fields(client, make_user):
    user, headers = await make_user()
    res = await client.patch(
        f"/api/v1/users/{user.id}", headers=headers,
        json={"gender": None, "country_id": None},
    )
    assert res.status_code == 200
    assert res.json()["data"]["gender"] is None


async def test_cannot_edit_someone_else(client, make_user):
    other, _ = await make_user()
    _, headers = await make_user()
    res = await client.patch(f"/api/v1/users/{other.id}", headers=headers, json={"name": "X"})
    assert res.status_code == 403


async def test_list_users_filters_by_type(client, make_user):
    _, headers = await make_user(type="BUSINESS")
    await make_user(type="INFLUENCER")
    await make_user(type="INFLUENCER")

    res = await client.get("/api/v1/users?type=influencer&limit=1", headers=headers)

    data = res.json()["data"]
    assert data["pagination"] == {"total": 2, "page": 1, "limit": 1, "total_pages": 2}
    assert len(data["users"]) == 1
    assert data["users"][0]["type"] == "INFLUENCER"


async def test_admin_suspension_blocks_login(client, make_user):
    _, admin_headers = await make_user(type="ADMIN")
    user, headers = await make_user()

    res = await client.post(
        f"/api/v1/users/{user.id}/suspend", headers=admin_headers, json={"suspend": True},
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] is False

    assert (await client.get("/api/v1/users/me", headers=headers)).status_code == 401
    login = await client.post("/api/v1/users/login", json={
        "email_address": user.email_address, "password": PASSWORD,
    })
    assert login.status_code == 403


async def test_suspend_requires_admin(client, make_user):
    user, headers = await make_user()
    res = await client.post(
        f"/api/v1/users/{user.id}/suspend", headers=headers, json={"suspend": True},
    )
    assert res.status_code == 403


async def test_click_counts_influencer_views(client, make_user):
    influencer, _ = await make_user()
    business, headers = await make_user(type="BUSINESS")

    first = await client.post(f"/api/v1/users/{influencer.id}/click", headers=headers)
    second = await client.post(f"/api/v1/users/{influencer.id}/click", headers=headers)
    assert first.json()["data"]["click_count"] == 1
    assert second.json()["data"]["click_count"] == 2

    res = await client.post(f"/api/v1/users/{business.id}/click", headers=headers)
    assert res.status_code == 400
    assert res.json()["message"] == "User is not an influencer."


async def test_viewing_a_profile_records_recent_view(client, make_user):
    influencer, _ = await make_user(name="Viewed Creator")
    _, headers = await make_user(type="BUSINESS")

    await client.get(f"/api/v1/users/{influencer.id}", headers=headers)
    dashboard = await client.get("/api/v1/dashboard", headers=headers)

    views = dashboard.json()["data"]["recent_views"]
    assert [v["name"] for v in views] == ["Viewed Creator"]
