"""
Paste admission and retrieval pipelines.

Each stage returns an explicit outcome and the first failure ends the
pipeline. PasteStoreError is the only exception that crosses a stage; it is
caught here and turned into a STORE_ERROR outcome.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from pastr.database import InsertResult, PasteStore, PasteStoreError
from pastr.models import Reason
from pastr.rate_limit import (
    CREATE_SCOPE,
    RETRIEVE_SCOPE,
    RateDecision,
    RateLimiter,
    create_identity,
    retrieve_identity,
)
from pastr.validation import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateOutcome:
    key: Optional[str] = None
    reason: Optional[Reason] = None
    details: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class RetrieveOutcome:
    content: Optional[str] = None
    reason: Optional[Reason] = None
    details: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


class PasteService:
    """Runs the create and retrieve pipelines against injected collaborators."""

    def __init__(
        self,
        store: PasteStore,
        limiter: RateLimiter,
        generate_key: Callable[[], str],
        max_key_attempts: int = 5,
        max_paste_bytes: Optional[int] = None,
        prefix_length: int = 20,
        fail_open: bool = False,
    ):
        self.store = store
        self.limiter = limiter
        self.generate_key = generate_key
        self.max_key_attempts = max_key_attempts
        self.max_paste_bytes = max_paste_bytes
        self.prefix_length = prefix_length
        self.fail_open = fail_open

    def _rate_check(self, scope: str, identity: str) -> bool:
        decision = self.limiter.check(scope, identity)
        if decision is RateDecision.UNAVAILABLE:
            return self.fail_open
        return decision is RateDecision.ALLOWED

    def create(self, raw: Any) -> CreateOutcome:
        """
        Validate, rate-check, and store a new paste.

        Args:
            raw: Submitted payload as received from the transport

        Returns:
            CreateOutcome with the new key, or the reason the paste was refused
        """
        result = validate(raw, max_bytes=self.max_paste_bytes)
        if not result.ok:
            logger.info(f"Paste rejected: {result.reason.value}")
            return CreateOutcome(reason=result.reason)

        content = result.text
        if not self._rate_check(CREATE_SCOPE, create_identity(content, self.prefix_length)):
            return CreateOutcome(reason=Reason.RATE_LIMITED)

        try:
            for attempt in range(1, self.max_key_attempts + 1):
                key = self.generate_key()
                if self.store.insert(key, content) is InsertResult.OK:
                    return CreateOutcome(key=key)
                logger.warning(
                    f"{Reason.STORE_CONFLICT.value} on attempt {attempt}/{self.max_key_attempts}"
                )
        except PasteStoreError as e:
            logger.error(f"Failed to store paste: {e}")
            return CreateOutcome(reason=Reason.STORE_ERROR, details=str(e))

        details = f"No free key after {self.max_key_attempts} attempts"
        logger.error(details)
        return CreateOutcome(reason=Reason.STORE_ERROR, details=details)

    def retrieve(self, key: str) -> RetrieveOutcome:
        """
        Rate-check and look up a paste by key.

        Args:
            key: Paste key issued by create()

        Returns:
            RetrieveOutcome with the content, NOT_FOUND, or another failure reason
        """
        if not self._rate_check(RETRIEVE_SCOPE, retrieve_identity(key)):
            return RetrieveOutcome(reason=Reason.RATE_LIMITED)

        try:
            paste = self.store.get_by_id(key)
        except PasteStoreError as e:
            logger.error(f"Failed to fetch paste: {e}")
            return RetrieveOutcome(reason=Reason.STORE_ERROR, details=str(e))

        if paste is None:
            return RetrieveOutcome(reason=Reason.NOT_FOUND)
        return RetrieveOutcome(content=paste.content)
