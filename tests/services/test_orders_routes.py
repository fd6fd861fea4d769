"""Order routes — offers, submission, completion side effects and refunds.

Invariants:
    - Offers to an influencer need that influencer's bank details
    - Completion splits the amount 20/80 between the ADMIN account and participants
    - A refund failure aborts the decline with 502 and leaves the order unchanged
    - Group orders pay the group admin and accepted members equal shares
    - A push reply that is not JSON never fails the request that sent it
"""

from decimal import Decimal

import httpx
from sqlalchemy import select

from kringp.infrastructure.push_client import PushClient, get_push_client
from kringp.main import app
from kringp.models import Earning, Group, GroupInvite, Notification, Order, UserStats


async def _offer(client, headers, business, influencer, **overrides):
    body = {
        "business_id": str(business.id),
        "influencer_id": str(influencer.id),
        "title": "Reel for launch",
        "total_amount": "1000",
        "completion_date": 7,
    }
    body.update(overrides)
    return await client.post("/api/v1/orders", headers=headers, json=body)


async def test_offer_requires_influencer_bank_details(client, make_user):
    business, headers = await make_user(type="BUSINESS")
    influencer, _ = await make_user()

    res = await _offer(client, headers, business, influencer)

    assert res.status_code == 400
    assert res.json()["message"] == "Influencer must add bank details before Creating offers."


async def test_offer_needs_exactly_one_target(client, make_user):
    business, headers = await make_user(type="BUSINESS")
    res = await client.post(
        "/api/v1/orders", headers=headers, json={"business_id": str(business.id)},
    )
    assert res.status_code == 400


async def test_create_offer_notifies_business(client, make_user, add_bank_detail, fake_push):
    business, headers = await make_user(type="BUSINESS", fcm_token="brand-device")
    influencer, _ = await make_user(name="Asha")
    await add_bank_detail(influencer)

    res = await _offer(client, headers, business, influencer)

    assert res.status_code == 201
    data = res.json()["data"]
    assert data["status"] == 0
    assert data["status_name"] == "PENDING"
    assert data["payment_status"] == "PENDING"
    assert data["influencer"]["name"] == "Asha"
    assert fake_push.sent == [{
        "token": "brand-device",
        "title": "New Offer Received",
        "body": "You have received a new Offer from Asha",
        "data": fake_push.sent[0]["data"],
    }]


async def test_outsider_cannot_create_or_view(client, make_user, add_bank_detail):
    business, business_headers = await make_user(type="BUSINESS")
    influencer, _ = await make_user()
    _, outsider = await make_user(type="BUSINESS")
    await add_bank_detail(influencer)

    denied = await _offer(client, outsider, business, influencer)
    assert denied.status_code == 403

    order = (await _offer(client, business_headers, business, influencer)).json()["data"]
    res = await client.get(f"/api/v1/orders/{order['id']}", headers=outsider)
    assert res.status_code == 403


async def test_unknown_status_code_rejected(client, make_user, add_bank_detail):
    business, headers = await make_user(type="BUSINESS")
    influencer, _ = await make_user()
    await add_bank_detail(influencer)
    order = (await _offer(client, headers, business, influencer)).json()["data"]

    res = await client.post(
        f"/api/v1/orders/{order['id']}/status", headers=headers, json={"status": 9},
    )
    assert res.status_code == 400


async def test_complete_requires_submission(client, make_user, add_bank_detail):
    await make_user(type="ADMIN")
    business, headers = await make_user(type="BUSINESS")
    influencer, _ = await make_user()
    await add_bank_detail(influencer)
    order = (await _offer(client, headers, business, influencer)).json()["data"]

    res = await client.post(
        f"/api/v1/orders/{order['id']}/status", headers=headers, json={"status": 5},
    )

    assert res.status_code == 400
    assert res.json()["message"] == "Order must be submitted before it can be completed"


async def test_full_order_lifecycle_splits_earnings(
    client, make_user, add_bank_detail, fake_push, test_db,
):
    admin, _ = await make_user(type="ADMIN")
    business, business_headers = await make_user(type="BUSINESS")
    influencer, influencer_headers = await make_user(fcm_token="creator-device")
    await add_bank_detail(influencer)
    order = (await _offer(client, business_headers, business, influencer)).json()["data"]
    status_url = f"/api/v1/orders/{order['id']}/status"

    accepted = await client.post(status_url, headers=influencer_headers, json={"status": 1})
    assert accepted.json()["data"]["status"] == 1

    submitted = await client.post(
        f"/api/v1/orders/{order['id']}/submit", headers=influencer_headers,
        json={"social_media_link": "https://instagram.com/p/abc", "submitted_attachment": ["a.png"]},
    )
    assert submitted.json()["data"]["status"] == 4

    completed = await client.post(status_url, headers=business_headers, json={"status": 5})
    assert completed.status_code == 200
    assert completed.json()["data"]["status_name"] == "COMPLETED"

    again = await client.post(status_url, headers=business_headers, json={"status": 5})
    assert again.status_code == 400
    assert again.json()["message"] == "Order is already completed"

    earnings = (await test_db.execute(
        select(Earning).order_by(Earning.earning_amount),
    )).scalars().all()
    assert [(e.user_id, e.earning_amount, e.is_admin_share) for e in earnings] == [
        (admin.id, Decimal("200.00"), True),
        (influencer.id, Decimal("800.00"), False),
    ]
    stats = (await test_db.execute(
        select(UserStats).where(UserStats.user_id == influencer.id),
    )).scalar_one()
    assert stats.total_deals == 1
    assert stats.on_time_delivery == 1
    assert stats.total_earnings == Decimal("800.00")

    creator_pushes = [p for p in fake_push.sent if p["token"] == "creator-device"]
    assert creator_pushes[-1]["title"] == "Order Completed!"
    assert "₹800.00" in creator_pushes[-1]["body"]


async def test_completion_without_admin_account_fails(client, make_user, add_bank_detail):
    business, headers = await make_user(type="BUSINESS")
    influencer, influencer_headers = await make_user()
    await add_bank_detail(influencer)
    order = (await _offer(client, headers, business, influencer)).json()["data"]
    await client.post(f"/api/v1/orders/{order['id']}/submit", headers=influencer_headers, json={})

    res = await client.post(
        f"/api/v1/orders/{order['id']}/status", headers=headers, json={"status": 5},
    )

    assert res.status_code == 400
    assert res.json()["message"] == "Admin user not found"


async def test_decline_after_payment_refunds(client, make_user, add_bank_detail, fake_gateway):
    business, headers = await make_user(type="BUSINESS")
    influencer, _ = await make_user()
    await add_bank_detail(influencer)
    order = (await _offer(
        client, headers, business, influencer, final_amount="900",
    )).json()["data"]
    status_url = f"/api/v1/orders/{order['id']}/status"

    activated = await client.post(
        status_url, headers=headers, json={"status": 3, "payment_reference": "pay_123"},
    )
    assert activated.json()["data"]["payment_status"] == "COMPLETED"

    declined = await client.post(
        status_url, headers=headers, json={"status": 6, "reason": "Changed plans"},
    )

    assert declined.json()["data"]["payment_status"] == "REFUND"
    assert declined.json()["data"]["reason"] == "Changed plans"
    assert fake_gateway.refunds == [("pay_123", Decimal("900.00"))]


async def test_refund_failure_leaves_order_untouched(
    client, make_user, add_bank_detail, fake_gateway, test_db,
):
    business, headers = await make_user(type="BUSINESS")
    influencer, _ = await make_user()
    await add_bank_detail(influencer)
    order = (await _offer(client, headers, business, influencer)).json()["data"]
    status_url = f"/api/v1/orders/{order['id']}/status"
    await client.post(status_url, headers=headers, json={"status": 3, "payment_reference": "pay_9"})
    fake_gateway.fail = True

    res = await client.post(status_url, headers=headers, json={"status": 6})

    assert res.status_code == 502
    row = (await test_db.execute(
        select(Order).where(Order.business_id == business.id)
        .execution_options(populate_existing=True),
    )).scalar_one()
    assert row.status == "ACTIVATED"
    assert row.payment_status == "COMPLETED"


async def test_list_orders_filters_by_status(client, make_user, add_bank_detail):
    business, headers = await make_user(type="BUSINESS")
    influencer, influencer_headers = await make_user()
    await add_bank_detail(influencer)
    first = (await _offer(client, headers, business, influencer)).json()["data"]
    await _offer(client, headers, business, influencer, title="Second")
    await client.post(
        f"/api/v1/orders/{first['id']}/status", headers=headers, json={"status": 2},
    )

    canceled = await client.get("/api/v1/orders?status=2", headers=influencer_headers)
    pending = await client.get("/api/v1/orders?status=0", headers=influencer_headers)

    assert [o["id"] for o in canceled.json()["data"]["orders"]] == [first["id"]]
    assert pending.json()["data"]["pagination"]["total"] == 1


async def test_admin_listing_requires_admin(client, make_user):
    _, headers = await make_user(type="BUSINESS")
    assert (await client.get("/api/v1/orders/admin", headers=headers)).status_code == 403


async def _complete(client, order, business_headers, submitter_headers):
    await client.post(
        f"/api/v1/orders/{order['id']}/submit", headers=submitter_headers, json={},
    )
    return await client.post(
        f"/api/v1/orders/{order['id']}/status", headers=business_headers, json={"status": 5},
    )


async def test_group_order_completion_splits_among_admin_and_members(
    client, make_user, test_db,
):
    admin, _ = await make_user(type="ADMIN")
    business, business_headers = await make_user(type="BUSINESS")
    leader, leader_headers = await make_user()
    member, _ = await make_user()
    pending, _ = await make_user()
    group = Group(group_name="Crew", admin_user_id=leader.id)
    test_db.add(group)
    await test_db.flush()
    test_db.add(GroupInvite(
        group_id=group.id, invited_user_id=member.id, request_status="ACCEPTED",
    ))
    test_db.add(GroupInvite(
        group_id=group.id, invited_user_id=pending.id, request_status="PENDING",
    ))
    await test_db.commit()

    order = (await _offer(
        client, business_headers, business, leader,
        influencer_id=None, group_id=str(group.id),
    )).json()["data"]
    res = await _complete(client, order, business_headers, leader_headers)

    assert res.status_code == 200
    earnings = (await test_db.execute(select(Earning))).scalars().all()
    split = sorted((e.user_id, e.earning_amount, e.is_admin_share) for e in earnings)
    assert split == sorted([
        (admin.id, Decimal("200.00"), True),
        (leader.id, Decimal("400.00"), False),
        (member.id, Decimal("400.00"), False),
    ])
    for uid in (leader.id, member.id):
        stats = (await test_db.execute(
            select(UserStats).where(UserStats.user_id == uid)
            .execution_options(populate_existing=True),
        )).scalar_one()
        assert stats.total_deals == 1
        assert stats.total_earnings == Decimal("400.00")
    assert await test_db.scalar(
        select(UserStats.id).where(UserStats.user_id == pending.id),
    ) is None


async def test_second_completed_order_marks_repeat_client(
    client, make_user, add_bank_detail, test_db,
):
    await make_user(type="ADMIN")
    business, business_headers = await make_user(type="BUSINESS")
    influencer, influencer_headers = await make_user()
    await add_bank_detail(influencer)

    for title in ("First", "Second"):
        order = (await _offer(
            client, business_headers, business, influencer, title=title,
        )).json()["data"]
        res = await _complete(client, order, business_headers, influencer_headers)
        assert res.status_code == 200

    stats = (await test_db.execute(
        select(UserStats).where(UserStats.user_id == influencer.id)
        .execution_options(populate_existing=True),
    )).scalar_one()
    assert stats.total_deals == 2
    assert stats.repeat_clients == 1
    assert stats.total_earnings == Decimal("1600.00")


async def test_push_reply_without_json_does_not_fail_offer(
    client, make_user, add_bank_detail, test_db,
):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="OK"))
    app.dependency_overrides[get_push_client] = lambda: PushClient(
        "https://push.test/send", "srv-key", transport=transport,
    )
    business, headers = await make_user(type="BUSINESS", fcm_token="brand-device")
    influencer, _ = await make_user()
    await add_bank_detail(influencer)

    res = await _offer(client, headers, business, influencer)

    assert res.status_code == 201
    row = (await test_db.execute(
        select(Notification).where(Notification.user_id == business.id),
    )).scalar_one()
    assert row.status == "SENT"
