"""Security helpers for hashing, access tokens and channel grants."""

from datetime import timedelta
from hashlib import sha256

from jose import JWTError, jwt
from passlib.context import CryptContext

from taskboard.config import get_settings
from taskboard.utils import utc_now

# ---- Hashing con una sola librería (passlib) ----
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__rounds=310_000,
)

_ALGORITHM = "HS256"
_GRANT_SCOPE = "channel"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# ---- JWT ----


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = utc_now() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def password_signature(password_hash: str, approved: bool) -> str:
    """Fingerprint invalidating tokens once the password or approval changes."""

    return sha256(f"{password_hash}:{int(approved)}".encode()).hexdigest()


# ---- Channel grants ----


def create_channel_grant(*, socket_id: str, channel_name: str, user_id: int) -> str:
    """Sign a short-lived grant allowing ``socket_id`` to join ``channel_name``."""

    settings = get_settings()
    expire = utc_now() + timedelta(seconds=settings.channel_grant_expire_seconds)
    claims = {
        "scope": _GRANT_SCOPE,
        "sid": socket_id,
        "chn": channel_name,
        "uid": user_id,
        "exp": expire,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=_ALGORITHM)


def verify_channel_grant(grant: str, *, socket_id: str, channel_name: str) -> int:
    """Return the user id bound to ``grant`` or raise ``ValueError``."""

    try:
        claims = jwt.decode(grant, get_settings().secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid channel grant") from exc

    if claims.get("scope") != _GRANT_SCOPE:
        raise ValueError("Invalid channel grant")
    if claims.get("sid") != socket_id or claims.get("chn") != channel_name:
        raise ValueError("Channel grant does not match this subscription")
    user_id = claims.get("uid")
    if not isinstance(user_id, int):
        raise ValueError("Invalid channel grant")
    return user_id


__all__ = [
    "create_access_token",
    "create_channel_grant",
    "decode_access_token",
    "get_password_hash",
    "password_signature",
    "verify_channel_grant",
    "verify_password",
]
