"""
Push notification service.

Uses Firebase Cloud Messaging through ``firebase-admin``. The SDK is blocking,
so every send runs in a worker thread under ``PUSH_TIMEOUT_SECONDS``.
"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import List, Optional

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import InvalidArgumentError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.exceptions import InternalError, NotFoundError, ValidationError
from core.logging import get_logger
from models.push_token import PushToken
from repositories.push_token import PushTokenRepository

logger = get_logger(__name__)

FIREBASE_APP_NAME = "ultracare"
MULTICAST_LIMIT = 500
MIN_TOKEN_LENGTH = 100
TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9\-_:]+$")
DEFAULT_PLATFORM = "ios"


@dataclass
class PushFailure:
    token: str
    code: Optional[str]
    error: str
    invalid: bool = False


@dataclass
class MulticastResult:
    attempted: int
    sent: int
    failed: int
    failures: List[PushFailure] = field(default_factory=list)


def _is_invalid_token_error(exc: Exception) -> bool:
    return isinstance(exc, (messaging.UnregisteredError, InvalidArgumentError))


def _notification(title: str, body: str) -> dict:
    return {
        "notification": messaging.Notification(title=title, body=body),
        "apns": messaging.APNSConfig(payload=messaging.APNSPayload(aps=messaging.Aps(sound="default"))),
    }


class PushService:
    """FCM sender. Unconfigured instances refuse to send."""

    def __init__(self, service_account_path: Optional[str] = None, timeout: float = 10.0):
        self.service_account_path = service_account_path
        self.timeout = timeout
        self._app = None

        if not service_account_path:
            logger.warning("Firebase configuration incomplete, push disabled")

    @classmethod
    def from_settings(cls, settings: Settings) -> "PushService":
        return cls(settings.FIREBASE_SERVICE_ACCOUNT_PATH, settings.PUSH_TIMEOUT_SECONDS)

    @property
    def is_configured(self) -> bool:
        return bool(self.service_account_path)

    def _get_app(self):
        if self._app is None:
            if not self.is_configured:
                raise InternalError("Missing FIREBASE_SERVICE_ACCOUNT_PATH")
            try:
                self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
            except ValueError:
                cred = credentials.Certificate(self.service_account_path)
                self._app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
        return self._app

    async def _run(self, func, *args, **kwargs):
        return await asyncio.wait_for(asyncio.to_thread(func, *args, **kwargs), timeout=self.timeout)

    async def send_multicast(self, tokens: List[str], title: str, body: str) -> MulticastResult:
        batch = tokens[:MULTICAST_LIMIT]
        message = messaging.MulticastMessage(tokens=batch, **_notification(title, body))
        response = await self._run(messaging.send_each_for_multicast, message, app=self._get_app())

        failures = []
        for token, item in zip(batch, response.responses):
            if item.success:
                continue
            exc = item.exception
            failures.append(PushFailure(
                token=token,
                code=getattr(exc, "code", None),
                error=str(exc) if exc else "Unknown error",
                invalid=exc is not None and _is_invalid_token_error(exc),
            ))

        return MulticastResult(
            attempted=len(batch),
            sent=response.success_count,
            failed=response.failure_count,
            failures=failures,
        )

    async def send_one(self, token: str, title: str, body: str) -> str:
        message = messaging.Message(token=token, **_notification(title, body))
        return await self._run(messaging.send, message, app=self._get_app())


def clean_token(token) -> str:
    """Return the trimmed token or raise ``ValidationError``."""
    if not token or not isinstance(token, str):
        raise ValidationError("Required: token (string)")

    cleaned = token.strip()
    if len(cleaned) < MIN_TOKEN_LENGTH:
        raise ValidationError("Invalid token format (too short to be real FCM token)")
    if not TOKEN_PATTERN.match(cleaned):
        raise ValidationError("Invalid token format (unexpected characters)")
    return cleaned


async def register_token(db: AsyncSession, token, platform: Optional[str] = None) -> PushToken:
    cleaned = clean_token(token)
    saved = await PushTokenRepository(db).upsert(cleaned, platform or DEFAULT_PLATFORM)
    logger.info(f"Registered push token {saved.id} ({saved.platform})")
    return saved


async def send_test(db: AsyncSession, push: PushService, title: Optional[str], body: Optional[str]) -> MulticastResult:
    """Multicast to saved iOS tokens and prune the ones FCM rejects as invalid."""
    if not title or not body:
        raise ValidationError("Required: title, body")

    repo = PushTokenRepository(db)
    tokens = await repo.tokens_for_platform(DEFAULT_PLATFORM)
    if not tokens:
        raise NotFoundError("No iOS tokens saved yet")

    result = await _send_multicast_or_fail(push, tokens, title, body)

    stale = [f.token for f in result.failures if f.invalid]
    if stale:
        removed = await repo.delete_tokens(stale)
        logger.info(f"Pruned {removed} invalid push tokens")
    return result


async def send_one(push: PushService, token: Optional[str], title: Optional[str], body: Optional[str]) -> str:
    if not token or not title or not body:
        raise ValidationError("Required: token, title, body")

    try:
        return await push.send_one(token, title, body)
    except InternalError:
        raise
    except Exception as e:
        logger.error(f"Push send-one failed: {str(e)}")
        raise InternalError(str(e) or "Server error")


async def _send_multicast_or_fail(push: PushService, tokens: List[str], title: str, body: str) -> MulticastResult:
    try:
        return await push.send_multicast(tokens, title, body)
    except InternalError:
        raise
    except Exception as e:
        logger.error(f"Push multicast failed: {str(e)}")
        raise InternalError(str(e) or "Server error")


async def notify_new_alert(session_factory, push: PushService, title: str, body: str) -> Optional[MulticastResult]:
    """Fan an alert out to every iOS token. Failures are logged, never raised."""
    try:
        async with session_factory() as db:
            repo = PushTokenRepository(db)
            tokens = await repo.tokens_for_platform(DEFAULT_PLATFORM)
            if not tokens:
                return None

            result = await push.send_multicast(tokens, title, body)
            stale = [f.token for f in result.failures if f.invalid]
            if stale:
                await repo.delete_tokens(stale)
            logger.info(f"Alert push sent={result.sent} failed={result.failed}")
            return result
    except Exception as e:
        logger.error(f"Alert push failed: {str(e)}")
        return None
