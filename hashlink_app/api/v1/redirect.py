from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from hashlink_app.services.link_service import LinkService
from hashlink_app.dependencies import get_link_service

router = APIRouter(tags=["redirect"])


@router.get("/{identifier}")
async def redirect_to_original_url(
    identifier: str,
    link_service: LinkService = Depends(get_link_service)
):
    """
    Redirect to the original URL.

    Both short forms are served here: the hash id (shortened_url) and
    the custom hash (branded_url).
    """
    original_url = await link_service.resolve_original_url(identifier)

    if not original_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found"
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
