"""
Use Cases

Organized into domain folders:
- signature_otp/: Signer OTP issue, verification and policy lookup
- workflow/: Workflow configuration and transition / state-access queries
- sales/: Sale status changes and role-filtered listing
- settings/: OTP policy and messaging provider administration
- notifications/: Templated client notifications
- audit/: Audit logs

Import from subdirectories for better organization.
"""

from .signature_otp import (
    SendOtpUseCase,
    VerifyOtpUseCase,
    GetOtpPolicyUseCase,
)
from .workflow import (
    GetWorkflowConfigUseCase,
    UpsertWorkflowConfigUseCase,
    CheckTransitionUseCase,
    GetAvailableTransitionsUseCase,
    GetStateAccessUseCase,
)
from .sales import (
    ChangeSaleStatusUseCase,
    ListSalesUseCase,
)
from .settings import (
    GetOtpPolicyAdminUseCase,
    UpdateOtpPolicyUseCase,
    GetMessagingSettingsUseCase,
    UpdateMessagingSettingsUseCase,
)
from .notifications import (
    SendNotificationUseCase,
    ListNotificationsUseCase,
)
from .audit import (
    GetAuditEventsUseCase,
)

__all__ = [
    # Signature OTP
    "SendOtpUseCase",
    "VerifyOtpUseCase",
    "GetOtpPolicyUseCase",
    # Workflow
    "GetWorkflowConfigUseCase",
    "UpsertWorkflowConfigUseCase",
    "CheckTransitionUseCase",
    "GetAvailableTransitionsUseCase",
    "GetStateAccessUseCase",
    # Sales
    "ChangeSaleStatusUseCase",
    "ListSalesUseCase",
    # Settings
    "GetOtpPolicyAdminUseCase",
    "UpdateOtpPolicyUseCase",
    "GetMessagingSettingsUseCase",
    "UpdateMessagingSettingsUseCase",
    # Notifications
    "SendNotificationUseCase",
    "ListNotificationsUseCase",
    # Audit
    "GetAuditEventsUseCase",
]
