"""Bank details — the payout destination for earnings and coin withdrawals.

Invariants:
    - At most one active record per user; a second create → 409
    - account_number is stored encrypted and only ever returned masked
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from kringp.api.deps import get_current_user
from kringp.core.envelope import success
from kringp.core.errors import ConflictError, PermissionDeniedError, ResourceNotFoundError
from kringp.infrastructure.database import get_db
from kringp.infrastructure.security import FieldCipher, get_cipher
from kringp.models import BankDetail, User
from kringp.schemas.profile import BankDetailCreate, BankDetailUpdate
from kringp.services.common import get_or_404
from kringp.services.wallet import active_bank_detail

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/bank-details", tags=["bank-details"])


def _payload(detail: BankDetail, cipher: FieldCipher) -> dict:
    return {
        "id": detail.id,
        "user_id": detail.user_id,
        "account_holder_name": detail.account_holder_name,
        "account_number": cipher.mask(cipher.decrypt(detail.account_number)),
        "ifsc_code": detail.ifsc_code,
        "bank_name": detail.bank_name,
        "account_type": detail.account_type,
        "status": detail.status,
        "created_at": detail.created_at,
    }


async def _owned(db: AsyncSession, detail_id: UUID, user: User) -> BankDetail:
    detail = await get_or_404(db, BankDetail, detail_id, "Bank detail")
    if detail.user_id != user.id:
        raise PermissionDeniedError("You can only manage your own bank details")
    return detail


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_bank_detail(
    body: BankDetailCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if await active_bank_detail(db, user.id) is not None:
        raise ConflictError("Bank details already added; update the existing record instead")
    cipher = get_cipher()
    detail = BankDetail(
        user_id=user.id,
        account_holder_name=body.account_holder_name,
        account_number=cipher.encrypt(body.account_number),
        ifsc_code=body.ifsc_code,
        bank_name=body.bank_name,
        account_type=body.account_type,
        status=True,
    )
    db.add(detail)
    await db.commit()
    await db.refresh(detail)
    logger.info("Bank details added", extra={"user_id": str(user.id)})
    return success("Bank details added successfully", _payload(detail, cipher))


@router.get("")
async def get_bank_detail(
    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db),
):
    detail = await active_bank_detail(db, user.id)
    if detail is None:
        raise ResourceNotFoundError("Bank detail")
    return success("Bank details fetched successfully", _payload(detail, get_cipher()))


@router.patch("/{detail_id}")
async def update_bank_detail(
    detail_id: UUID,
    body: BankDetailUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    detail = await _owned(db, detail_id, user)
    cipher = get_cipher()
    values = body.model_dump(exclude_unset=True, exclude_none=True)
    if "account_number" in values:
        values["account_number"] = cipher.encrypt(values["account_number"])
    for field, value in values.items():
        setattr(detail, field, value)
    await db.commit()
    await db.refresh(detail)
    return success("Bank details updated successfully", _payload(detail, cipher))


@router.delete("/{detail_id}")
async def delete_bank_detail(
    detail_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    detail = await _owned(db, detail_id, user)
    await db.delete(detail)
    await db.commit()
    return success("Bank details deleted successfully")
