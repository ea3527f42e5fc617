"""Field-level validation and input sanitizing rules.

Pure helpers shared by the step validators and the session's change
handling: format patterns, attachment extension checks and keystroke
sanitizers.
"""

import re

ZIPCODE_PATTERN = re.compile(r"\d{5}", re.ASCII)
PHONE_PATTERN = re.compile(r"\d{10}", re.ASCII)
PHONE_LENGTH = 10
SIGNER_COUNT_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)

# Image types accepted for attachments
ALLOWED_IMAGE_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png", ".webp", ".svg"})

_NON_DIGIT = re.compile(r"\D")
_SIGNER_SEPARATORS = re.compile(r"[,\s]")


def is_blank(value: str | None) -> bool:
    """True for ``None``, empty or whitespace-only strings."""
    return value is None or not value.strip()


def is_valid_zipcode(value: str) -> bool:
    """Check for exactly five ASCII digits and nothing else."""
    return bool(ZIPCODE_PATTERN.fullmatch(value))


def is_valid_phone(value: str) -> bool:
    """Check for exactly ten ASCII digits."""
    return bool(PHONE_PATTERN.fullmatch(value))


def _extract_extension(filename: str) -> str:
    """Return the lowercase extension including the dot, or empty string."""
    name = filename.rsplit("/", 1)[-1].split("?", 1)[0]
    dot_idx = name.rfind(".")
    if dot_idx == -1:
        return ""
    return name[dot_idx:].lower()


def is_allowed_image(filename: str) -> bool:
    """Check whether an attachment name or URL has an accepted image extension."""
    return _extract_extension(filename) in ALLOWED_IMAGE_EXTENSIONS


def allowed_image_extensions_display() -> str:
    """Comma-separated list of accepted image extensions."""
    return ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS))


def sanitize_phone(value: str, current: str = "") -> str:
    """Strip non-digits from a typed phone number.

    Input that would exceed ten digits is rejected and the current value kept.

    Args:
        value: Raw typed value.
        current: Value currently stored.

    Returns:
        The value to store.
    """
    digits = _NON_DIGIT.sub("", value or "")
    if len(digits) > PHONE_LENGTH:
        return current
    return digits


def parse_signer_count(value: str | int | float | None) -> int | None:
    """Convert a typed signer count (``"1,250"`` style allowed) to an int.

    Only commas and whitespace are dropped.  Anything else that is not a
    whole number (``"2.5"``, ``"abc"``, ``2.5``) yields ``None`` so the contact
    step reports it; signs are kept so ``"-5"`` fails the positive check.

    Returns:
        The count, or ``None`` when the value is empty or not a whole number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if not isinstance(value, str):
        return None
    text = _SIGNER_SEPARATORS.sub("", value)
    if not SIGNER_COUNT_PATTERN.fullmatch(text):
        return None
    return int(text)
