"""
Extraction API Router
=====================
Runs text extraction for one uploaded document and refreshes the
project's knowledge base.
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_services, rate_limited_user
from app.api.errors import ApiError
from app.api.schemas import ErrorResponse, ExtractTextRequest, ExtractTextResponse
from app.api.services import AppServices
from app.processor.models import ExtractionRequest

router = APIRouter(prefix="/api", tags=["extraction"])


@router.post(
    "/extract-text",
    response_model=ExtractTextResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def extract_text(
    payload: ExtractTextRequest,
    user_id: str = Depends(rate_limited_user),
    services: AppServices = Depends(get_services),
) -> ExtractTextResponse:
    """Extract a document's text with the first strategy that succeeds."""
    request = ExtractionRequest(
        document_id=payload.document_id or "",
        project_id=payload.project_id or "",
        user_id=user_id,
        file_url=payload.file_url or "",
        file_name=payload.file_name or "",
        file_type=payload.file_type or "",
    )

    missing = payload.missing_fields()
    if missing:
        details = ", ".join(missing)
        services.processor.reject(request, f"Missing required fields: {details}")
        raise ApiError(400, "Missing required fields", details)

    result = services.processor.process(request)
    return ExtractTextResponse(
        success=True,
        text_length=result.text_length,
        extraction_method=result.extraction_method,
        message=f"Text extracted successfully via {result.extraction_method}",
    )
