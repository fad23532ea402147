"""Display-only phone redaction."""

from __future__ import annotations

from typing import Optional

from app.visibility.policy import VisibilityVerdict

SHORT_PHONE_MASK = "****"


def mask_phone(raw: Optional[str]) -> Optional[str]:
    """Partially redact a phone number for display.

    Blank input is unavailable (None). Fewer than four characters cannot be
    partially revealed and always become ``****``. Otherwise the first four
    and last three characters of the trimmed value are kept.
    """
    value = (raw or "").strip()
    if not value:
        return None
    if len(value) < 4:
        return SHORT_PHONE_MASK
    return f"{value[:4]}-***-{value[-3:]}"


def render_phone(raw: Optional[str], verdict: VisibilityVerdict) -> Optional[str]:
    """Phone value to emit under ``verdict``; None means omit the field."""
    if not verdict.can_view:
        return None
    if verdict.show_full:
        return (raw or "").strip() or None
    return mask_phone(raw)
