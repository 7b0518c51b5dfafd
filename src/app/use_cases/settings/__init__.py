"""
Company Settings Use Cases

OTP policy and messaging provider administration.
"""

from .messaging_settings_use_cases import (
    GetMessagingSettingsUseCase,
    UpdateMessagingSettingsUseCase,
)
from .otp_policy_use_cases import GetOtpPolicyAdminUseCase, UpdateOtpPolicyUseCase

__all__ = [
    "GetOtpPolicyAdminUseCase",
    "UpdateOtpPolicyUseCase",
    "GetMessagingSettingsUseCase",
    "UpdateMessagingSettingsUseCase",
]
