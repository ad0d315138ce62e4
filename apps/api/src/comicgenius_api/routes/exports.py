"""Export routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response

from comicgenius_export import PDFOptions, comic_pdf_filename
from comicgenius_services import ExportService
from comicgenius_api.deps import get_session_manager, verify_token
from comicgenius_api.schemas import ErrorResponse

router = APIRouter(prefix="/sessions/{session_id}/export", tags=["Export"])


@router.get(
    "/pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def export_pdf(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
    title: Optional[str] = Query(None, max_length=200),
    author: Optional[str] = Query(None, max_length=200),
    page_numbers: bool = Query(True),
    title_page: bool = Query(True),
):
    """Download the comic as a PDF."""
    options = PDFOptions(include_page_numbers=page_numbers, include_title_page=title_page)
    if title:
        options.title = title
    if author:
        options.author = author

    pdf = ExportService(get_session_manager(session_id)).export_pdf(options)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{comic_pdf_filename(title)}"'},
    )
