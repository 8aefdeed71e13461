"""
news.py
- Purpose: Create + edit routes for news articles.
- Design: Keep router thin. Delegate business logic to services.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.api.deps import get_form_service
from app.constants.categories import LEGAL_CATEGORIES
from app.schemas.forms import SaveResponse
from app.services.form_service import FormService, FormSubmission
from app.validations.file_validators import candidate_from_upload

router = APIRouter(prefix="/api/admin/news", tags=["News"])


def _article_values(
    title: str,
    description: str,
    brief: str,
    source: str,
    liveLink: str,
    category: str,
    views: int,
    isTrending: bool,
    published: bool,
) -> dict:
    return {
        "title": title,
        "description": description,
        "brief": brief,
        "source": source,
        "liveLink": liveLink,
        "category": category,
        "views": views,
        "isTrending": isTrending,
        "published": published,
    }


@router.get("/categories")
def list_categories():
    return {"categories": list(LEGAL_CATEGORIES)}


@router.post("", response_model=SaveResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    title: str = Form(""),
    description: str = Form(""),
    brief: str = Form(""),
    source: str = Form(""),
    liveLink: str = Form(""),
    category: str = Form(""),
    views: int = Form(0),
    isTrending: bool = Form(False),
    published: bool = Form(False),
    imageUrl: str | None = Form(None),
    image: UploadFile | None = File(None),
    svc: FormService = Depends(get_form_service),
):
    form = svc.open_create("news")
    submission = FormSubmission(
        values=_article_values(title, description, brief, source, liveLink, category, views, isTrending, published),
        file=await candidate_from_upload(image),
        manual_reference=imageUrl,
    )
    result = await svc.submit(form, submission)
    return SaveResponse.from_result(result)


@router.put("/{news_id}", response_model=SaveResponse)
async def update_article(
    news_id: str,
    title: str = Form(""),
    description: str = Form(""),
    brief: str = Form(""),
    source: str = Form(""),
    liveLink: str = Form(""),
    category: str = Form(""),
    views: int = Form(0),
    isTrending: bool = Form(False),
    published: bool = Form(False),
    imageUrl: str | None = Form(None),
    removeImage: bool = Form(False),
    image: UploadFile | None = File(None),
    svc: FormService = Depends(get_form_service),
):
    form = await svc.open_edit("news", news_id)
    submission = FormSubmission(
        values=_article_values(title, description, brief, source, liveLink, category, views, isTrending, published),
        file=await candidate_from_upload(image),
        manual_reference=imageUrl,
        remove_asset=removeImage,
    )
    result = await svc.submit(form, submission)
    return SaveResponse.from_result(result)
