"""Common validation helpers for user use cases."""

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100


def normalize_email(email: str) -> str:
    """Return a trimmed, lower-cased address or raise ``ValueError``."""

    normalized = email.strip().lower()
    if normalized.count("@") != 1:
        raise ValueError("Invalid email address")
    local_part, domain = normalized.split("@", 1)
    if not local_part or not domain:
        raise ValueError("Invalid email address")
    return normalized


def ensure_valid_name(name: str) -> str:
    normalized = name.strip()
    if not NAME_MIN_LENGTH <= len(normalized) <= NAME_MAX_LENGTH:
        msg = f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
        raise ValueError(msg)
    return normalized


def ensure_valid_password(password: str) -> str:
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        msg = (
            f"Password must be between {PASSWORD_MIN_LENGTH} and "
            f"{PASSWORD_MAX_LENGTH} characters"
        )
        raise ValueError(msg)
    return password
