"""
AI Request Schemas
"""

from typing import List, Optional

from pydantic import Field

from toyrotator.schemas.base import CallableRequest


class AiRotationSuggestionRequest(CallableRequest):
    child_id: str = Field(min_length=1)
    toy_ids: Optional[List[str]] = Field(
        default=None,
        description="Candidate subset; defaults to every non-retired toy",
    )


class ImageRequest(CallableRequest):
    image_base64: str = Field(min_length=1, description="Base64 image, optionally a data: URL")
