"""
Builds the multimodal request for one Gemini call: ordered content parts,
system instruction and response schema.
"""
import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from creative_audit.services.creative_audit.errors import InvalidImageError
from creative_audit.services.creative_audit.prompts import (
    IMAGE_MIME_TYPE,
    SYSTEM_PROMPT,
    build_response_schema,
)
from creative_audit.services.creative_audit.validation import has_image, has_text
from creative_audit.utils import strip_data_url_prefix


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    data: bytes
    mime_type: str = IMAGE_MIME_TYPE


@dataclass(frozen=True)
class AuditPayload:
    parts: List[Any]
    system_instruction: str = SYSTEM_PROMPT
    response_schema: Dict[str, Any] = field(default_factory=lambda: build_response_schema(False))

    @property
    def has_image(self) -> bool:
        return any(isinstance(p, ImagePart) for p in self.parts)


def decode_image(image: str) -> bytes:
    """Decode base64 image data, with or without a data-URL prefix."""
    # line-wrapped base64 is accepted
    data = "".join(strip_data_url_prefix(image).split())
    try:
        decoded = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError() from e
    if not decoded:
        raise InvalidImageError()
    return decoded


def assemble_payload(
    text: Optional[str],
    image: Optional[str],
    *,
    include_image: bool = True,
) -> AuditPayload:
    """
    Text part first (when present), then the inline image part (when present and included).
    The response schema requires simulated_heatmap only when the image part is sent.
    """
    parts: List[Any] = []
    if has_text(text):
        parts.append(TextPart(text=text))
    if include_image and has_image(image):
        parts.append(ImagePart(data=decode_image(image)))
    with_image = any(isinstance(p, ImagePart) for p in parts)
    return AuditPayload(
        parts=parts,
        response_schema=build_response_schema(with_heatmap=with_image),
    )
