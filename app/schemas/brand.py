"""
Pydantic schemas for the brand/logo generator webhook.
"""
from typing import Optional
from pydantic import BaseModel, Field


class BrandRequest(BaseModel):
    industry: str = Field(..., min_length=1, description="Industry, e.g. Fitness or Finance")
    style: str = Field(..., min_length=1, description="Preferred style, e.g. Modern or Elegant")


class BrandResponse(BaseModel):
    output: str
    slogan: Optional[str] = None
    image_url: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "output": "PulseForge: bold geometric mark in electric teal",
                "slogan": "Train with intent",
                "image_url": "https://example.com/logo.png"
            }
        }
