from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user
from core.database import get_db
from core.exceptions import NotFoundError, ValidationError
from models.user import User
from repositories.user import UserRepository
from schemas.auth import HouseholdAdminRead, HouseholdAdminStatusUpdate

router = APIRouter()


@router.get("")
async def list_household_admins(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    users = await UserRepository(db).list_newest_first()
    return {"ok": True, "users": [HouseholdAdminRead.model_validate(u) for u in users]}


@router.patch("/{id}/status")
async def set_household_admin_status(
    id: int,
    body: HouseholdAdminStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if body.is_disabled is None:
        raise ValidationError("isDisabled must be boolean")
    if id == current_user.id and body.is_disabled:
        raise ValidationError("You cannot disable yourself")

    repo = UserRepository(db)
    user = await repo.get(id)
    if not user:
        raise NotFoundError("User not found")

    updated = await repo.update(user, {"is_disabled": body.is_disabled})
    return {"ok": True, "user": HouseholdAdminRead.model_validate(updated)}
