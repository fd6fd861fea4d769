"""Group routes — creation, invites, answers and visibility.

Invariants:
    - The creator becomes the admin and every invitee gets a PENDING invite and a push
    - Public views list accepted members only
    - An invite can be answered once, by the invitee
"""


async def _create_group(client, headers, **overrides):
    body = {"group_name": "Creators Club", "social_platforms": ["INSTAGRAM"]}
    body.update(overrides)
    return await client.post("/api/v1/groups", headers=headers, json=body)


async def test_create_group_invites_members(client, make_user, fake_push):
    admin, headers = await make_user(name="Admin Creator")
    member, _ = await make_user(fcm_token="member-device")

    res = await _create_group(client, headers, invited_user_ids=[str(member.id)] * 2)

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["admin"]["id"] == str(admin.id)
    assert [m["request_status"] for m in data["members"]] == ["PENDING"]
    assert data["members"][0]["request_status_code"] == 0
    assert data["member_count"] == 0
    assert [(p["token"], p["title"]) for p in fake_push.sent] == [
        ("member-device", "Group Invitation"),
    ]


async def test_group_name_is_unique(client, make_user):
    _, headers = await make_user()
    await _create_group(client, headers)
    res = await _create_group(client, headers, group_name="creators club")
    assert res.status_code == 409


async def test_cannot_invite_yourself(client, make_user):
    admin, headers = await make_user()
    res = await _create_group(client, headers, invited_user_ids=[str(admin.id)])
    assert res.status_code == 400


async def test_accepting_invite_makes_member_visible(client, make_user, fake_push):
    _, admin_headers = await make_user(name="Admin Creator")
    member, member_headers = await make_user(name="Member Creator")
    group = (await _create_group(
        client, admin_headers, invited_user_ids=[str(member.id)],
    )).json()["data"]

    public_before = (await client.get(f"/api/v1/groups/{group['id']}")).json()["data"]
    assert public_before["members"] == []

    res = await client.post(
        f"/api/v1/groups/{group['id']}/respond", headers=member_headers, json={"accept": True},
    )
    assert res.status_code == 200
    assert res.json()["data"]["request_status"] == "ACCEPTED"
    assert fake_push.sent[-1]["title"] == "Group Invitation Update"

    public_after = (await client.get(f"/api/v1/groups/{group['id']}")).json()["data"]
    assert [m["name"] for m in public_after["members"]] == ["Member Creator"]
    assert public_after["member_count"] == 1

    mine = (await client.get("/api/v1/groups/mine", headers=member_headers)).json()["data"]
    assert [g["id"] for g in mine["groups"]] == [group["id"]]


async def test_invite_can_only_be_answered_once(client, make_user):
    _, admin_headers = await make_user()
    member, member_headers = await make_user()
    group = (await _create_group(
        client, admin_headers, invited_user_ids=[str(member.id)],
    )).json()["data"]
    url = f"/api/v1/groups/{group['id']}/respond"

    await client.post(url, headers=member_headers, json={"accept": False})
    again = await client.post(url, headers=member_headers, json={"accept": True})

    assert again.status_code == 400
    assert again.json()["message"] == "This invite has already been answered"


async def test_uninvited_user_cannot_respond(client, make_user):
    _, admin_headers = await make_user()
    _, stranger_headers = await make_user()
    group = (await _create_group(client, admin_headers)).json()["data"]

    res = await client.post(
        f"/api/v1/groups/{group['id']}/respond", headers=stranger_headers, json={"accept": True},
    )
    assert res.status_code == 404


async def test_my_invites_lists_pending(client, make_user):
    _, admin_headers = await make_user()
    member, member_headers = await make_user()
    await _create_group(client, admin_headers, invited_user_ids=[str(member.id)])

    res = await client.get("/api/v1/groups/invites?status=PENDING", headers=member_headers)

    invites = res.json()["data"]["invites"]
    assert [i["group_name"] for i in invites] == ["Creators Club"]


async def test_add_members_skips_existing_invites(client, make_user):
    _, admin_headers = await make_user()
    first, _ = await make_user()
    second, _ = await make_user()
    group = (await _create_group(
        client, admin_headers, invited_user_ids=[str(first.id)],
    )).json()["data"]

    res = await client.post(
        f"/api/v1/groups/{group['id']}/members", headers=admin_headers,
        json={"invited_user_ids": [str(first.id), str(second.id)]},
    )

    assert res.json()["data"]["invited_user_ids"] == [str(second.id)]
    assert len(res.json()["data"]["group"]["members"]) == 2


async def test_only_admin_updates_or_views_invites(client, make_user):
    _, admin_headers = await make_user()
    _, other_headers = await make_user()
    group = (await _create_group(client, admin_headers)).json()["data"]

    res = await client.patch(
        f"/api/v1/groups/{group['id']}", headers=other_headers, json={"group_bio": "x"},
    )
    assert res.status_code == 403
    invites = await client.get(f"/api/v1/groups/{group['id']}/invites", headers=other_headers)
    assert invites.status_code == 403

    ok = await client.patch(
        f"/api/v1/groups/{group['id']}", headers=admin_headers,
        json={"group_bio": "We make reels", "visibility": "PRIVATE"},
    )
    assert ok.json()["data"]["group_bio"] == "We make reels"
    listing = await client.get("/api/v1/groups")
    assert listing.json()["data"]["groups"] == []


async def test_group_invites_are_paginated(client, make_user):
    _, admin_headers = await make_user()
    invitees = [await make_user() for _ in range(3)]
    group = (await _create_group(
        client, admin_headers, invited_user_ids=[str(u.id) for u, _ in invitees],
    )).json()["data"]

    res = await client.get(
        f"/api/v1/groups/{group['id']}/invites?page=2&limit=2", headers=admin_headers,
    )

    data = res.json()["data"]
    assert data["pagination"] == {"total": 3, "page": 2, "limit": 2, "total_pages": 2}
    assert len(data["invites"]) == 1
