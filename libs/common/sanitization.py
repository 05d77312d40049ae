"""Input sanitization for free-text fields.

Usage in schemas:
    from libs.common.sanitization import SanitizedStr

    class ClubCreate(BaseModel):
        name: SanitizedStr
"""

import html
import re
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator

_SCRIPT_BLOCK = re.compile(r"<(script|style)\b[^<]*(?:(?!</\1>)<[^<]*)*</\1>", re.I)
_TAG = re.compile(r"<[^>]*>")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_PHONE_CHARS = re.compile(r"[^\d+]")


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """Strip tags (dropping script/style bodies) and control characters."""
    if value is None:
        return None
    cleaned = _SCRIPT_BLOCK.sub("", value)
    cleaned = _TAG.sub("", cleaned)
    cleaned = html.unescape(cleaned)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    return cleaned.strip()


def sanitize_phone(value: Optional[str]) -> Optional[str]:
    """Keep digits and a leading plus sign."""
    if value is None:
        return None
    digits = _PHONE_CHARS.sub("", value.strip())
    if digits.startswith("+"):
        return "+" + digits[1:].replace("+", "")
    return digits.replace("+", "")


def _sanitize_any(value: Any) -> Any:
    return sanitize_text(value) if isinstance(value, str) else value


def _sanitize_list(value: Any) -> Any:
    if isinstance(value, list):
        return [sanitize_text(item) if isinstance(item, str) else item for item in value]
    return value


SanitizedStr = Annotated[str, BeforeValidator(_sanitize_any)]
SanitizedList = Annotated[list[str], BeforeValidator(_sanitize_list)]
PhoneStr = Annotated[str, BeforeValidator(lambda v: sanitize_phone(v) if isinstance(v, str) else v)]
