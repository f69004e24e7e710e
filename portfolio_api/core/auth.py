"""Credential verification and session tokens.

SessionManager is the only place that signs or checks session tokens:

- login(): email/password check with bcrypt, then issue()
- issue(): HS256 JWT with {id, sub, iat, exp, jti}, valid for the session TTL
- authenticate(): token string -> user id, or MissingTokenError /
  InvalidTokenError

Tokens are not persisted and cannot be revoked before they expire; logout
only clears the cookie.

Cookie helpers and token extraction live here too so the API layer never
touches JWT details.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from fastapi import Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.core.config import Settings, settings
from portfolio_api.core.errors import (
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)
from portfolio_api.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=5)

_ALGORITHM = "HS256"

# bcrypt only hashes the first 72 bytes; longer passwords are rejected
_BCRYPT_MAX_BYTES = 72

# Pre-computed bcrypt hash for timing-safe comparison on user-not-found.
# Security: prevents user enumeration via response time differences.
# Pre-generated to avoid ~300ms bcrypt computation on every app startup.
DUMMY_HASH = b"$2b$12$ZP2PVB8yI35X.mkRqcUPUuSzJA1CNRt4dZ7X3cyrfJu.2S3w.Qen2"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plain-text password.

    Returns:
        bcrypt hash as a string.

    Raises:
        ValidationError: If the password is empty or longer than bcrypt accepts.
    """
    encoded = password.encode("utf-8")
    if not encoded:
        raise ValidationError("Password must not be empty")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise ValidationError(
            f"Password must be at most {_BCRYPT_MAX_BYTES} bytes"
        )
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | bytes) -> bool:
    """Compare a password against a bcrypt hash in constant time.

    Returns False for malformed hashes and over-long passwords instead of
    raising, so every failure looks the same to the caller.
    """
    stored = (
        password_hash.encode("utf-8")
        if isinstance(password_hash, str)
        else password_hash
    )
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored)
    except ValueError:
        return False


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed session token.

    Attributes:
        token: Encoded JWT.
        subject_id: User the token authenticates.
        issued_at: Issue time (whole seconds, UTC).
        expires_at: Expiry time; the token is invalid from this instant on.
    """

    token: str
    subject_id: uuid.UUID
    issued_at: datetime
    expires_at: datetime

    @property
    def max_age(self) -> int:
        """Cookie max-age in seconds."""
        return int((self.expires_at - self.issued_at).total_seconds())


class SessionManager:
    """Issues and validates session tokens.

    Args:
        secret: HMAC signing secret.
        ttl: Token lifetime. Defaults to 5 hours.
        issuer: Value for the iss claim.
        audience: Value for the aud claim.
        clock: Returns the current UTC time. Injectable for tests.
    """

    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        issuer: str = "portfolio-api",
        audience: str = "portfolio-api",
        clock: Clock = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("SessionManager requires a non-empty secret")
        if ttl <= timedelta(0):
            raise ValueError("Session TTL must be positive")
        self._secret = secret
        self.ttl = ttl
        self.issuer = issuer
        self.audience = audience
        self._clock = clock

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "SessionManager":
        """Build a SessionManager from application settings."""
        return cls(
            secret=app_settings.auth_secret.get_secret_value(),
            ttl=timedelta(hours=app_settings.session_ttl_hours),
            issuer=app_settings.auth_issuer,
            audience=app_settings.auth_audience,
        )

    async def login(self, db: AsyncSession, email: str, password: str) -> IssuedToken:
        """Verify credentials and issue a session token.

        Args:
            db: Async database session.
            email: Login email (case-insensitive).
            password: Plain-text password.

        Returns:
            IssuedToken for the matching user.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password. Both
                cases take the same path through bcrypt.
        """
        user = await UserRepository.get_by_email(db, email)

        if user is None:
            # Security: burn the same bcrypt cost as a real check
            verify_password(password, DUMMY_HASH)
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentialsError()

        issued = self.issue(user.id)
        logger.info("Login succeeded for user %s", user.id)
        return issued

    def issue(self, subject_id: uuid.UUID) -> IssuedToken:
        """Sign a token for a user.

        Args:
            subject_id: User id to embed.

        Returns:
            IssuedToken valid from now until now + ttl.
        """
        issued_at = self._clock().astimezone(UTC).replace(microsecond=0)
        expires_at = issued_at + self.ttl
        payload = {
            "id": str(subject_id),
            "sub": str(subject_id),
            "iss": self.issuer,
            "aud": self.audience,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
            # Random per issuance: two logins never yield the same token
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
        return IssuedToken(
            token=token,
            subject_id=subject_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def authenticate(self, token: str | None) -> uuid.UUID:
        """Validate a token and return the user id it carries.

        Valid iff the signature checks out, iss/aud match, and
        iat <= now < exp.

        Args:
            token: Encoded JWT, or None/empty when the request had none.

        Returns:
            Subject user id.

        Raises:
            MissingTokenError: No token supplied.
            InvalidTokenError: Any other failure.
        """
        if not token:
            raise MissingTokenError()

        try:
            # Time checks are done below against the injected clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "require": ["exp", "iat", "sub"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
            subject_id = uuid.UUID(str(payload.get("id") or payload["sub"]))
            issued_at = int(payload["iat"])
            expires_at = int(payload["exp"])
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as exc:
            logger.info("Rejected session token: %s", type(exc).__name__)
            raise InvalidTokenError() from exc

        now = self._clock().timestamp()
        if now < issued_at:
            logger.info("Rejected session token: issued in the future")
            raise InvalidTokenError()
        if now >= expires_at:
            logger.info("Rejected session token: expired")
            raise InvalidTokenError()

        return subject_id


def extract_token(request: Request, cookie_name: str | None = None) -> str | None:
    """Find the session token on a request.

    A well-formed ``Authorization: Bearer <token>`` header wins over the
    session cookie.

    Args:
        request: Incoming request.
        cookie_name: Session cookie name. Defaults to AUTH_COOKIE_NAME.

    Returns:
        Token string, or None if the request carries neither.
    """
    header = request.headers.get("Authorization")
    if header:
        scheme, _, credentials = header.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()

    return request.cookies.get(cookie_name or settings.auth_cookie_name) or None


def set_session_cookie(response: Response, issued: IssuedToken) -> None:
    """Set the httpOnly session cookie on a response.

    Security: httpOnly prevents XSS cookie theft. Secure and SameSite come
    from settings; the defaults (Secure, SameSite=None) allow the portfolio
    frontend on another origin to send it.

    Args:
        response: FastAPI response object.
        issued: Token to store.
    """
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=issued.token,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite=settings.auth_cookie_samesite,
        path="/",
        max_age=issued.max_age,
        domain=settings.auth_cookie_domain or None,
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie immediately.

    Uses the same attributes as set_session_cookie(); browsers ignore a
    delete whose attributes differ.
    """
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        domain=settings.auth_cookie_domain or None,
        secure=settings.auth_cookie_secure,
        httponly=True,
        samesite=settings.auth_cookie_samesite,
    )
