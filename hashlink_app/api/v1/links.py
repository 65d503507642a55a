from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from hashlink_app.schemas.link import LinkCreate, LinkUpdate, LinkResponse
from hashlink_app.services.link_service import LinkService
from hashlink_app.dependencies import get_link_service

router = APIRouter(prefix="/links", tags=["links"])


@router.post("/", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
async def create_link(
    link_data: LinkCreate,
    link_service: LinkService = Depends(get_link_service)
):
    """Shorten a URL, optionally under a custom hash"""
    return await link_service.create_link(
        link_data.original_url,
        hash=link_data.hash,
        creator_id=link_data.creator_id,
    )


@router.get("/lookup", response_model=LinkResponse)
async def find_link_by_url(
    url: str = Query(..., min_length=1, description="Destination URL in any equivalent form"),
    link_service: LinkService = Depends(get_link_service)
):
    """Find the link that shortens a given URL"""
    link = await link_service.get_link_by_url(url)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No link for this URL"
        )
    return link


@router.get("/{identifier}", response_model=LinkResponse)
async def get_link(
    identifier: str,
    link_service: LinkService = Depends(get_link_service)
):
    """Get a link by hash id or custom hash"""
    link = await link_service.get_link(identifier)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
    return link


@router.patch("/{identifier}", response_model=LinkResponse)
async def update_link(
    identifier: str,
    link_data: LinkUpdate,
    link_service: LinkService = Depends(get_link_service)
):
    """Change a link's destination or custom hash"""
    link = await link_service.update_link(
        identifier,
        original_url=link_data.original_url,
        hash=link_data.hash,
    )
    if not link:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
    return link


@router.delete("/{identifier}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(
    identifier: str,
    link_service: LinkService = Depends(get_link_service)
):
    """Delete a link"""
    if not await link_service.delete_link(identifier):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
