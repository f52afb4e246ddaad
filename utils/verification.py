import hmac
import re
import secrets
from datetime import datetime, timezone, timedelta

OTP_LENGTH = 6

# Identifiers matching this are looked up as customer phone numbers
PHONE_PATTERN = re.compile(r"^[+]?[0-9]{10,15}$")


def generate_verification_code() -> str:
    return str(secrets.randbelow(900000) + 100000)


def get_code_expiry_time(minutes: int = 10) -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


def is_expired(expires_at: datetime) -> bool:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at < datetime.now(timezone.utc)


def codes_match(submitted: str, expected: str) -> bool:
    return hmac.compare_digest(submitted.strip().encode(), expected.encode())


def looks_like_phone_number(identifier: str) -> bool:
    return bool(PHONE_PATTERN.match(identifier))
