"""
One-time code primitives: generation, hashing and destination masking.
"""

import hashlib
import hmac
import secrets

ALLOWED_OTP_LENGTHS = (4, 6, 8)


def generate_otp(length: int = 6) -> str:
    """
    Generate a numeric one-time code from the OS CSPRNG.

    Args:
        length: Number of digits (4, 6 or 8)

    Returns:
        Decimal string of exactly `length` digits, left-zero-padded
    """
    if length not in ALLOWED_OTP_LENGTHS:
        raise ValueError(f"OTP length must be one of {ALLOWED_OTP_LENGTHS}, got {length}")
    return str(secrets.randbelow(10**length)).zfill(length)


def hash_otp(otp: str) -> str:
    """SHA-256 hex digest of the code, the only form that is persisted"""
    return hashlib.sha256(otp.encode("utf-8")).hexdigest()


def otp_matches(otp: str, otp_hash: str) -> bool:
    return hmac.compare_digest(hash_otp(otp), otp_hash)


def mask_email(email: str) -> str:
    user, _, domain = email.partition("@")
    if not user or not domain:
        return "***@***"
    return f"{user[:2]}{'*' * max(len(user) - 2, 3)}@{domain}"


def mask_phone(phone: str) -> str:
    if len(phone) <= 4:
        return "****"
    return "*" * (len(phone) - 4) + phone[-4:]
