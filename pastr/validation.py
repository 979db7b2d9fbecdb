"""
Paste content validation.

Only printable ASCII and ASCII whitespace are accepted. Unicode text is
rejected on purpose: the check exists to keep binary data and control
characters out of the store, not to support arbitrary text.
"""
import string
from dataclasses import dataclass
from typing import Any, Optional

from pastr.models import Reason

ALLOWED_CHARACTERS = frozenset(string.printable)
ALLOWED_BYTES = frozenset(string.printable.encode("ascii"))


@dataclass(frozen=True)
class ValidationResult:
    text: Optional[str] = None
    reason: Optional[Reason] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


def validate(raw: Any, max_bytes: Optional[int] = None) -> ValidationResult:
    """
    Check a submitted payload against the content policy.

    Args:
        raw: Submitted payload; str or bytes are text, anything else is not
        max_bytes: Optional size limit in bytes

    Returns:
        ValidationResult with the accepted text, or the rejection reason
    """
    if raw is None:
        return ValidationResult(reason=Reason.EMPTY_INPUT)

    if isinstance(raw, bytes):
        if not raw.strip():
            return ValidationResult(reason=Reason.EMPTY_INPUT)
        if max_bytes is not None and len(raw) > max_bytes:
            return ValidationResult(reason=Reason.TOO_LARGE)
        if not ALLOWED_BYTES.issuperset(raw):
            return ValidationResult(reason=Reason.NON_PLAIN_TEXT)
        return ValidationResult(text=raw.decode("ascii"))

    if not isinstance(raw, str):
        return ValidationResult(reason=Reason.WRONG_TYPE)

    if not raw.strip():
        return ValidationResult(reason=Reason.EMPTY_INPUT)
    # Checked before the size test: non-ASCII text has no byte length to compare.
    if not ALLOWED_CHARACTERS.issuperset(raw):
        return ValidationResult(reason=Reason.NON_PLAIN_TEXT)
    if max_bytes is not None and len(raw) > max_bytes:
        return ValidationResult(reason=Reason.TOO_LARGE)
    return ValidationResult(text=raw)
