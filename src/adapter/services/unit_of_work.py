from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.company_repository import CompanyRepository
from src.adapter.repositories.identity_verification_repository import IdentityVerificationRepository
from src.adapter.repositories.messaging_settings_repository import MessagingSettingsRepository
from src.adapter.repositories.notification_message_repository import NotificationMessageRepository
from src.adapter.repositories.otp_policy_repository import OtpPolicyRepository
from src.adapter.repositories.sale_repository import SaleRepository
from src.adapter.repositories.workflow_config_repository import WorkflowConfigRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.companies = CompanyRepository(self.session)
        self.sales = SaleRepository(self.session)
        self.otp_policies = OtpPolicyRepository(self.session)
        self.messaging_settings = MessagingSettingsRepository(self.session)
        self.verifications = IdentityVerificationRepository(self.session)
        self.workflow_configs = WorkflowConfigRepository(self.session)
        self.notifications = NotificationMessageRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
