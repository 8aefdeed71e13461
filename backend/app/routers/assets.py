"""
assets.py
- Purpose: Standalone asset routes: selection-time check with preview, delete by URL.
"""

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from app.api.deps import get_form_service
from app.core import ErrorCode
from app.core.errors import validation_error
from app.schemas.forms import AssetCheckResponse
from app.services.form_service import FormService
from app.validations.file_validators import candidate_from_upload

router = APIRouter(prefix="/api/admin/assets", tags=["Assets"])


@router.post("/validate", response_model=AssetCheckResponse)
async def validate_asset(
    image: UploadFile = File(...),
    svc: FormService = Depends(get_form_service),
):
    candidate = await candidate_from_upload(image)
    if candidate is None:
        raise validation_error(code=ErrorCode.FILE_MISSING, message="No file selected")
    result, preview = await svc.check_selection(candidate)
    return AssetCheckResponse.from_validation(result, preview)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_asset(
    reference: str = Query(..., min_length=1),
    svc: FormService = Depends(get_form_service),
):
    await svc.delete_asset(reference)
