"""
lawyers.py
- Purpose: Save route for the lawyer profile edit form.
- Design: Keep router thin. List fields arrive as comma-separated text.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.deps import get_form_service
from app.schemas.forms import SaveResponse
from app.services.form_service import FormService, FormSubmission
from app.validations.file_validators import candidate_from_upload

router = APIRouter(prefix="/api/admin/lawyers", tags=["Lawyers"])


@router.put("/{lawyer_id}", response_model=SaveResponse)
async def update_lawyer(
    lawyer_id: str,
    fullName: str | None = Form(None),
    email: str | None = Form(None),
    phoneNumber: str | None = Form(None),
    bio: str | None = Form(None),
    city: str | None = Form(None),
    state: str | None = Form(None),
    completeAddress: str | None = Form(None),
    gender: str | None = Form(None),
    yearsOfExperience: int | None = Form(None),
    specializations: str | None = Form(None),
    services: str | None = Form(None),
    courts: str | None = Form(None),
    languages: str | None = Form(None),
    profilePic: str | None = Form(None),
    removeImage: bool = Form(False),
    image: UploadFile | None = File(None),
    svc: FormService = Depends(get_form_service),
):
    form = await svc.open_edit("lawyer", lawyer_id)

    # only fields the admin actually sent overwrite the loaded record
    values = {
        "fullName": fullName,
        "email": email,
        "phoneNumber": phoneNumber,
        "bio": bio,
        "city": city,
        "state": state,
        "completeAddress": completeAddress,
        "gender": gender,
        "yearsOfExperience": yearsOfExperience,
    }
    lists = {
        "specializations": specializations,
        "services": services,
        "courts": courts,
        "languages": languages,
    }
    submission = FormSubmission(
        values={k: v for k, v in values.items() if v is not None},
        lists={k: v for k, v in lists.items() if v is not None},
        file=await candidate_from_upload(image),
        manual_reference=profilePic,
        remove_asset=removeImage,
    )
    result = await svc.submit(form, submission)
    return SaveResponse.from_result(result)
