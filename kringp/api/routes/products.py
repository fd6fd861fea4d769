"""Products — the coin reward catalog and redemptions against it.

Invariants:
    - product_code is PRODUCT-<n>, n = highest existing number + 1, starting at 1001
    - A redemption needs a coin summary with net balance >= price; it writes a
      negative PURCHASE coin transaction and moves the price into withdraw_amount
    - Falling below the redeem threshold re-arms the "you can redeem" email
"""

import logging
import re
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user, page_params, require_admin
from kringp.core.coins import check_purchase, should_reset_redeem_email
from kringp.core.domain_types import CoinStatus, CoinType, PurchaseStatus
from kringp.core.envelope import success
from kringp.core.errors import BusinessRuleError
from kringp.core.pagination import PageParams
from kringp.infrastructure.database import get_db
from kringp.models import Product, ProductPurchase, User
from kringp.schemas.wallet import (
    ProductCreate, ProductUpdate, PurchaseCreate, PurchaseStatusUpdate,
)
from kringp.services.common import get_or_404, paginate, reload
from kringp.services.wallet import balance_of, get_summary, record_coins, store_balance

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])

FIRST_PRODUCT_NUMBER = 1001
_CODE_PATTERN = re.compile(r"^PRODUCT-(\d+)$")


def next_product_code(existing: list[str]) -> str:
    numbers = [
        int(m.group(1)) for m in (_CODE_PATTERN.match(c or "") for c in existing) if m
    ]
    return f"PRODUCT-{max(numbers) + 1 if numbers else FIRST_PRODUCT_NUMBER}"


def _product_payload(p: Product) -> dict:
    return {
        "id": p.id,
        "product_code": p.product_code,
        "title": p.title,
        "description": p.description,
        "images": p.images,
        "coins": p.coins,
        "status": p.status,
        "created_at": p.created_at,
    }


def _purchase_payload(p: ProductPurchase) -> dict:
    return {
        "id": p.id,
        "user_id": p.user_id,
        "product": _product_payload(p.product) if p.product else None,
        "coins": p.coins,
        "status": p.status,
        "name": p.name,
        "phone_number": p.phone_number,
        "address_line1": p.address_line1,
        "address_line2": p.address_line2,
        "city": p.city,
        "state": p.state,
        "pincode": p.pincode,
        "created_at": p.created_at,
    }


def _purchases_query(purchase_status: PurchaseStatus | None):
    query = select(ProductPurchase).order_by(ProductPurchase.created_at.desc())
    if purchase_status is not None:
        query = query.where(ProductPurchase.status == purchase_status.value)
    return query


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    codes = (await db.execute(select(Product.product_code))).scalars().all()
    product = Product(product_code=next_product_code(list(codes)), **body.model_dump())
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info(f"Product created: {product.product_code}")
    return success("Product created successfully", _product_payload(product))


@router.get("")
async def list_products(
    min_coins: Decimal | None = Query(None, ge=0),
    max_coins: Decimal | None = Query(None, ge=0),
    search: str | None = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
):
    query = select(Product).where(Product.status.is_(True)).order_by(Product.created_at.desc())
    if min_coins is not None:
        query = query.where(Product.coins >= min_coins)
    if max_coins is not None:
        query = query.where(Product.coins <= max_coins)
    if search:
        term = search.lower()
        query = query.where(or_(
            func.lower(Product.title).contains(term),
            func.lower(Product.product_code).contains(term),
        ))
    data = await paginate(db, query, params, "products", _product_payload)
    return success("Products fetched successfully", data)


@router.post("/purchases", status_code=status.HTTP_201_CREATED)
async def purchase_product(
    body: PurchaseCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    product = await get_or_404(db, Product, body.product_id, "Product")
    if not product.status:
        raise BusinessRuleError("Product is not available")
    summary = await get_summary(db, user.id)
    if summary is None:
        raise BusinessRuleError(
            "Insufficient coins to purchase this product", "INSUFFICIENT_BALANCE",
        )
    after = check_purchase(balance_of(summary), product.coins)

    purchase = ProductPurchase(
        user_id=user.id,
        product_id=product.id,
        coins=product.coins,
        status=PurchaseStatus.PENDING.value,
        **body.model_dump(exclude={"product_id"}),
    )
    db.add(purchase)
    store_balance(summary, after)
    record_coins(
        db, user.id, -product.coins, CoinType.PURCHASE, CoinStatus.UNLOCKED,
        f"Purchased {product.title} ({product.product_code})",
    )
    if should_reset_redeem_email(after):
        summary.redeem_email_sent = False
    await db.commit()

    purchase = await reload(db, ProductPurchase, purchase.id)
    logger.info(
        f"Product {product.product_code} purchased",
        extra={"user_id": str(user.id), "amount": str(product.coins)},
    )
    return success("Product purchased successfully", {
        **_purchase_payload(purchase),
        "net_amount": summary.net_amount,
    })


@router.get("/purchases")
async def my_purchases(
    purchase_status: PurchaseStatus | None = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    query = _purchases_query(purchase_status).where(ProductPurchase.user_id == user.id)
    data = await paginate(db, query, params, "purchases", _purchase_payload)
    return success("Purchases fetched successfully", data)


@router.get("/purchases/all")
async def all_purchases(
    purchase_status: PurchaseStatus | None = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    data = await paginate(
        db, _purchases_query(purchase_status), params, "purchases", _purchase_payload,
    )
    return success("Purchases fetched successfully", data)


@router.patch("/purchases/{purchase_id}")
async def update_purchase_status(
    purchase_id: UUID,
    body: PurchaseStatusUpdate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    purchase = await get_or_404(db, ProductPurchase, purchase_id, "Purchase")
    purchase.status = body.status.value
    await db.commit()
    return success("Purchase status updated successfully", _purchase_payload(purchase))


@router.get("/{product_id}")
async def get_product(product_id: UUID, db: AsyncSession = Depends(get_db)):
    product = await get_or_404(db, Product, product_id, "Product")
    return success("Product fetched successfully", _product_payload(product))


@router.patch("/{product_id}")
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    product = await get_or_404(db, Product, product_id, "Product")
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, field, value)
    await db.commit()
    await db.refresh(product)
    return success("Product updated successfully", _product_payload(product))


@router.delete("/{product_id}")
async def delete_product(
    product_id: UUID,
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    product = await get_or_404(db, Product, product_id, "Product")
    await db.delete(product)
    await db.commit()
    return success("Product deleted successfully")


@router.get("/{product_id}/purchases")
async def product_purchases(
    product_id: UUID,
    params: PageParams = Depends(page_params),
    _: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await get_or_404(db, Product, product_id, "Product")
    query = _purchases_query(None).where(ProductPurchase.product_id == product_id)
    data = await paginate(db, query, params, "purchases", _purchase_payload)
    return success("Purchases fetched successfully", data)
