"""Auth endpoints."""

from fastapi import APIRouter, Depends

from stayhub.api.auth import get_current_caller
from stayhub.domain.models import CallerIdentity

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/whoami")
def whoami(caller: CallerIdentity = Depends(get_current_caller)) -> dict:
    """Identity resolved from the bearer token."""
    return {"id": caller.id, "groups": sorted(caller.groups)}
