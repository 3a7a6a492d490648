"""Security helpers: PII masking for safe logging (minimal)."""
import re

_EMAIL_RE = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+)")


def mask_pii(text: str) -> str:
    # Very naive masking: long digit runs (phone numbers, ids) and emails
    masked = re.sub(r"\b\d{10,}\b", "[REDACTED]", text)
    return mask_email(masked)


def mask_email(text: str) -> str:
    """Keep the first character and the domain: ``jane@x.org`` -> ``j***@x.org``."""
    if not text:
        return ""
    return _EMAIL_RE.sub(r"\1***@\2", text)
