"""Public routes: health plus the order and listing APIs."""

from fastapi import APIRouter

from stayhub.api.routes import auth, listings, orders

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


router.include_router(auth.router)
router.include_router(orders.router)
router.include_router(listings.router)
