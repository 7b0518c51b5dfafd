from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.company_repository import ICompanyRepository
from src.app.repositories.identity_verification_repository import IIdentityVerificationRepository
from src.app.repositories.messaging_settings_repository import IMessagingSettingsRepository
from src.app.repositories.notification_message_repository import INotificationMessageRepository
from src.app.repositories.otp_policy_repository import IOtpPolicyRepository
from src.app.repositories.sale_repository import ISaleRepository
from src.app.repositories.workflow_config_repository import IWorkflowConfigRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    companies: ICompanyRepository
    sales: ISaleRepository
    otp_policies: IOtpPolicyRepository
    messaging_settings: IMessagingSettingsRepository
    verifications: IIdentityVerificationRepository
    workflow_configs: IWorkflowConfigRepository
    notifications: INotificationMessageRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
