"""Badge facts — what the awarding rules see for a stored user."""

from decimal import Decimal

from sqlalchemy import select

from kringp.models import UserStats
from kringp.services.badges import collect_badge_facts


async def test_earnings_fact_excludes_withdrawn_money(make_user, test_db):
    user, _ = await make_user(earnings=Decimal("60000"))
    stats = (await test_db.execute(
        select(UserStats).where(UserStats.user_id == user.id),
    )).scalar_one()
    stats.total_withdraw = Decimal("50000")
    await test_db.commit()

    facts = await collect_badge_facts(test_db, user.id)

    assert facts.total_earnings == Decimal("60000")
    assert facts.completed_orders == 1


async def test_user_without_stats_has_zero_facts(make_user, test_db):
    user, _ = await make_user()

    facts = await collect_badge_facts(test_db, user.id)

    assert facts.total_earnings == Decimal("0")
    assert facts.completed_orders == 0
