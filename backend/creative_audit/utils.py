"""
Small helpers shared by config and the image payload builder.
"""
from typing import Optional
from urllib.parse import urlparse


def extract_origin(url: str | None) -> Optional[str]:
    """Return the origin (scheme + host [+ port]) from a URL-like string."""
    if not url:
        return None
    parsed = urlparse(url.strip())
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return None


def strip_data_url_prefix(value: str) -> str:
    """Drop a ``data:<mime>;base64,`` prefix if present; return the bare base64 payload."""
    value = value.strip()
    if "," in value:
        return value.split(",", 1)[1]
    return value


def strip_code_fence(text: str) -> str:
    """Strip a surrounding markdown code block (```json ... ```) if present."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines)
    return text
