from typing import Optional

from creative_audit.services.creative_audit.errors import EmptyInputError


def has_text(text: Optional[str]) -> bool:
    return bool((text or "").strip())


def has_image(image: Optional[str]) -> bool:
    return bool((image or "").strip())


def validate_submission(text: Optional[str], image: Optional[str]) -> None:
    """Reject a submission with neither text nor image before any network activity."""
    if not has_text(text) and not has_image(image):
        raise EmptyInputError()
