"""
clients.py
- Purpose: Save route for the client profile edit form.
- Design: Keep router thin. Delegate business logic to services.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_form_service
from app.schemas.forms import SaveResponse
from app.services.form_service import FormService, FormSubmission
from app.validations.file_validators import candidate_from_upload

router = APIRouter(prefix="/api/admin/clients", tags=["Clients"])


@router.put("/{client_id}", response_model=SaveResponse)
async def update_client(
    client_id: str,
    fullName: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    profilePic: str | None = Form(None),
    removeImage: bool = Form(False),
    image: UploadFile | None = File(None),
    svc: FormService = Depends(get_form_service),
):
    form = await svc.open_edit("client", client_id)
    submission = FormSubmission(
        values={"fullName": fullName, "email": email, "phone": phone},
        file=await candidate_from_upload(image),
        manual_reference=profilePic,
        remove_asset=removeImage,
    )
    result = await svc.submit(form, submission)
    return SaveResponse.from_result(result)
