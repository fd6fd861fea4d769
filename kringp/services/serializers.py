"""Payload builders — ORM rows to the JSON shapes the API returns.

Invariants:
    - Password hashes, stored tokens and push tokens never appear in a payload
    - Social platform view_count is internal and stripped from every payload
    - Money and coins leave as Decimal; the JSON encoder renders them as numbers
"""

from kringp.core.categories import group_subcategories
from kringp.core.order_status import code_for
from kringp.models import (
    Badge, Notification, Order, Rating, SocialMediaPlatform, User, UserStats,
)


def user_brief(user: User | None) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "name": user.name,
        "type": user.type,
        "user_image": user.user_image,
        "ratings": user.ratings,
    }


def badge_payload(badge: Badge) -> dict:
    return {
        "id": badge.id,
        "type": badge.type,
        "title": badge.title,
        "image": badge.image,
        "description": badge.description,
    }


def social_platform_payload(p: SocialMediaPlatform) -> dict:
    return {
        "id": p.id,
        "user_id": p.user_id,
        "platform": p.platform,
        "user_name": p.user_name,
        "image": p.image,
        "followers": p.followers,
        "engagement_rate": p.engagement_rate,
        "average_likes": p.average_likes,
        "average_comments": p.average_comments,
        "average_shares": p.average_shares,
        "price": p.price,
        "status": p.status,
    }


def stats_payload(stats: UserStats | None) -> dict | None:
    if stats is None:
        return None
    return {
        "total_deals": stats.total_deals,
        "on_time_delivery": stats.on_time_delivery,
        "repeat_clients": stats.repeat_clients,
        "total_earnings": stats.total_earnings,
        "total_withdraw": stats.total_withdraw,
        "average_value": stats.average_value,
    }


def _named(obj) -> dict | None:
    return {"id": obj.id, "name": obj.name} if obj is not None else None


def user_profile(user: User) -> dict:
    """Full profile: location names, categories, badges, platforms and stats."""
    return {
        "id": user.id,
        "type": user.type,
        "name": user.name,
        "email_address": user.email_address,
        "login_type": user.login_type,
        "country": _named(user.country),
        "state": _named(user.state),
        "city": _named(user.city),
        "brand_type": _named(user.brand_type),
        "user_image": user.user_image,
        "contact_person_name": user.contact_person_name,
        "contact_person_phone_number": user.contact_person_phone_number,
        "birth_date": user.birth_date,
        "gender": user.gender,
        "sample_work_link": user.sample_work_link,
        "about_you": user.about_you,
        "application_link": user.application_link,
        "description": user.description,
        "gst_number": user.gst_number,
        "referral_code": user.referral_code,
        "view_count": user.view_count,
        "ratings": user.ratings,
        "profile_completion": user.profile_completion,
        "status": user.status,
        "categories": group_subcategories(
            (link.subcategory, link.subcategory.category)
            for link in user.subcategory_links
        ),
        "social_media_platforms": [
            social_platform_payload(p) for p in user.social_platforms
        ],
        "badges": [badge_payload(ub.badge) for ub in user.user_badges],
        "stats": stats_payload(user.stats),
        "created_at": user.created_at,
    }


def order_payload(order: Order) -> dict:
    return {
        "id": order.id,
        "business_id": order.business_id,
        "influencer_id": order.influencer_id,
        "group_id": order.group_id,
        "title": order.title,
        "description": order.description,
        "completion_date": order.completion_date,
        "total_amount": order.total_amount,
        "discount_amount": order.discount_amount,
        "final_amount": order.final_amount,
        "status": code_for(order.status),
        "status_name": order.status,
        "payment_status": order.payment_status,
        "submitted_description": order.submitted_description,
        "social_media_link": order.social_media_link,
        "submitted_attachment": order.submitted_attachment,
        "reason": order.reason,
        "business": user_brief(order.business),
        "influencer": user_brief(order.influencer),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def rating_payload(rating: Rating) -> dict:
    return {
        "id": rating.id,
        "order_id": rating.order_id,
        "group_id": rating.group_id,
        "rated_by_user_id": rating.rated_by_user_id,
        "rated_to_user_id": rating.rated_to_user_id,
        "type_to_user": rating.type_to_user,
        "rating": rating.rating,
        "review": rating.review,
        "created_at": rating.created_at,
    }


def notification_payload(n: Notification) -> dict:
    return {
        "id": n.id,
        "title": n.title,
        "body": n.body,
        "type": n.type,
        "order_id": n.order_id,
        "status": n.status,
        "error": n.error,
        "is_read": n.is_read,
        "created_at": n.created_at,
    }
