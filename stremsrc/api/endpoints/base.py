from fastapi import APIRouter
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get(
    "/",
    tags=["General"],
    summary="Root Redirect",
    description="Redirects to the add-on manifest.",
)
async def root():
    return RedirectResponse("/manifest.json")


@router.get(
    "/health",
    tags=["General"],
    summary="Health Check",
    description="Returns the health status of the application.",
)
async def health():
    return {"status": "ok"}
