import logging
import time
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.orm import Session

from app.config import settings
from app.models.user import User
from app.services.errors import InvalidCredentials, TooManyAttempts
from app.services.user_service import get_user, get_user_by_email
from app.utils.security import generate_token, hash_credential, verify_credential

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """The authenticated principal for one request."""

    user_id: str
    token: str


class AuthService:
    def __init__(self):
        self._active_tokens: dict[str, tuple[str, float]] = {}  # token -> (user_id, expires_at)
        self._dummy_hash: str | None = None

    def _cleanup_expired(self):
        now = time.time()
        self._active_tokens = {
            t: entry for t, entry in self._active_tokens.items() if entry[1] > now
        }

    def _verify_dummy(self, credential: str):
        # Unknown emails still pay for one hash verification.
        if self._dummy_hash is None:
            self._dummy_hash = hash_credential(generate_token())
        verify_credential(self._dummy_hash, credential)

    def authenticate(self, db: Session, email: str, credential: str, throttle_key: str = "login") -> dict:
        delay = self._get_throttle_delay(db, throttle_key)
        if delay > 0:
            raise TooManyAttempts(delay)

        user = get_user_by_email(db, email)
        if user is None:
            self._verify_dummy(credential)
            verified = False
        else:
            verified = verify_credential(user.credential_hash, credential)

        if not verified:
            self._record_failed_attempt(db, throttle_key)
            logger.warning("Failed login attempt (%s)", throttle_key)
            raise InvalidCredentials("Invalid email or credential")

        self._reset_failed_attempts(db, throttle_key)
        token = generate_token()
        self._active_tokens[token] = (user.id, time.time() + settings.session_ttl_seconds)
        logger.info("User %s signed in", user.id)

        return {"token": token, "expires_in_seconds": settings.session_ttl_seconds, "user": user}

    def resolve(self, token: str) -> SessionContext | None:
        self._cleanup_expired()
        entry = self._active_tokens.get(token)
        if entry is None:
            return None
        user_id, _ = entry
        # Sliding expiry: any authenticated request extends the session.
        self._active_tokens[token] = (user_id, time.time() + settings.session_ttl_seconds)
        return SessionContext(user_id=user_id, token=token)

    def current_user(self, db: Session, context: SessionContext) -> User | None:
        return get_user(db, context.user_id)

    def logout(self, token: str):
        self._active_tokens.pop(token, None)

    def logout_all(self):
        self._active_tokens.clear()

    def _get_throttle_delay(self, db: Session, key: str) -> float:
        row = db.execute(
            text("SELECT failed_attempts, last_failed_at FROM auth_throttle WHERE key = :key"),
            {"key": key},
        ).fetchone()
        if not row:
            return 0
        failed_attempts = int(row[0])
        last_failed_at = float(row[1])

        if failed_attempts < 3:
            return 0
        if failed_attempts < 5:
            delay = 5.0
        elif failed_attempts < 10:
            delay = 30.0
        else:
            delay = 300.0
        elapsed = time.time() - last_failed_at
        remaining = delay - elapsed
        return max(0, remaining)

    def _record_failed_attempt(self, db: Session, key: str):
        now = time.time()
        db.execute(
            text(
                """
                INSERT INTO auth_throttle (key, failed_attempts, last_failed_at)
                VALUES (:key, 1, :now)
                ON CONFLICT(key) DO UPDATE SET
                    failed_attempts = failed_attempts + 1,
                    last_failed_at = :now
                """
            ),
            {"key": key, "now": now},
        )
        db.commit()

    def _reset_failed_attempts(self, db: Session, key: str):
        db.execute(
            text(
                """
                INSERT INTO auth_throttle (key, failed_attempts, last_failed_at)
                VALUES (:key, 0, :now)
                ON CONFLICT(key) DO UPDATE SET
                    failed_attempts = 0,
                    last_failed_at = :now
                """
            ),
            {"key": key, "now": time.time()},
        )
        db.commit()


auth_service = AuthService()
