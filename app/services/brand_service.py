"""
Client for the brand/logo generator webhook.

POSTs {industry, style} to the configured endpoint and normalises the answer
into BrandResponse.
"""
import logging
from typing import Optional

import httpx

from app.core.config import BRAND_WEBHOOK_URL, WEBHOOK_TIMEOUT_SECONDS
from app.core.exceptions import WebhookError
from app.schemas.brand import BrandRequest, BrandResponse

logger = logging.getLogger(__name__)

FALLBACK_OUTPUT = "Something went wrong."


class BrandClient:
    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout: float = WEBHOOK_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.webhook_url = webhook_url if webhook_url is not None else BRAND_WEBHOOK_URL
        self.timeout = timeout
        self.transport = transport

    def generate(self, request: BrandRequest) -> BrandResponse:
        if not self.webhook_url:
            raise WebhookError("Brand webhook is not configured")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.webhook_url, json=request.model_dump())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Brand webhook returned {e.response.status_code}")
            raise WebhookError("Brand generator returned an error") from e
        except httpx.HTTPError as e:
            logger.error(f"Brand webhook request failed: {type(e).__name__}: {e}")
            raise WebhookError("Brand generator unreachable") from e
        except ValueError as e:
            logger.error(f"Brand webhook sent invalid JSON: {e}")
            raise WebhookError("Brand generator sent an invalid response") from e

        if not isinstance(data, dict):
            data = {}
        logger.info(f"Brand generated: industry={request.industry}, style={request.style}")
        return BrandResponse(
            output=data.get("output") or FALLBACK_OUTPUT,
            slogan=data.get("slogan"),
            image_url=data.get("image_url"),
        )
