"""
Brand/logo generator endpoint backed by an external webhook.
"""
from fastapi import APIRouter, Depends

from app.api.errors import to_http_exception
from app.core.auth_dependency import get_current_user
from app.core.dependencies import get_brand_client
from app.core.exceptions import WebhookError
from app.schemas.brand import BrandRequest, BrandResponse
from app.services.brand_service import BrandClient

router = APIRouter(prefix="/brand", tags=["Brand"])


@router.post("/generate", response_model=BrandResponse)
def generate_brand(
    data: BrandRequest,
    email: str = Depends(get_current_user),
    client: BrandClient = Depends(get_brand_client),
):
    try:
        return client.generate(data)
    except WebhookError as e:
        raise to_http_exception(e)
