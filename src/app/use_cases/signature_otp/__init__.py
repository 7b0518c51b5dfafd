"""
Signature OTP Use Cases

Signer-facing OTP issue, verification and policy lookup.
"""

from .get_otp_policy_use_case import GetOtpPolicyUseCase
from .send_otp_use_case import SendOtpUseCase
from .verify_otp_use_case import VerifyOtpUseCase

__all__ = [
    "SendOtpUseCase",
    "VerifyOtpUseCase",
    "GetOtpPolicyUseCase",
]
