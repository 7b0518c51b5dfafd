from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.identity_verification_repository import IIdentityVerificationRepository
from src.domain.entities import SignatureIdentityVerification, VerificationResult

Verification = SignatureIdentityVerification


class IdentityVerificationRepository(IIdentityVerificationRepository):
    """
    SignatureIdentityVerification repository implementation using SQLModel.

    State changes on a record are conditional UPDATEs so concurrent
    verify calls cannot undercount attempts or resurrect a closed record.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, verification: Verification) -> Verification:
        self.session.add(verification)
        await self.session.flush()
        await self.session.refresh(verification)
        return verification

    async def get_latest_pending(self, signature_link_id: UUID) -> Optional[Verification]:
        stmt = (
            select(Verification)
            .where(
                Verification.signature_link_id == signature_link_id,
                Verification.result == VerificationResult.pending,
            )
            .order_by(Verification.created_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def supersede_pending(self, signature_link_id: UUID, keep_id: UUID) -> int:
        stmt = (
            update(Verification)
            .where(
                Verification.signature_link_id == signature_link_id,
                Verification.result == VerificationResult.pending,
                Verification.id != keep_id,
            )
            .values(result=VerificationResult.superseded)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def register_attempt(
        self, verification_id: UUID, ip_address: str, user_agent: str
    ) -> Optional[int]:
        stmt = (
            update(Verification)
            .where(
                Verification.id == verification_id,
                Verification.result == VerificationResult.pending,
                Verification.attempts < Verification.max_attempts,
            )
            .values(
                attempts=Verification.attempts + 1,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None

        attempts = await self.session.execute(
            select(Verification.attempts).where(Verification.id == verification_id)
        )
        return attempts.scalar_one()

    async def mark_result(
        self,
        verification_id: UUID,
        result: VerificationResult,
        verified_at: Optional[datetime] = None,
    ) -> bool:
        values = {"result": result}
        if verified_at is not None:
            values["verified_at"] = verified_at
        stmt = (
            update(Verification)
            .where(
                Verification.id == verification_id,
                Verification.result == VerificationResult.pending,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        outcome = await self.session.execute(stmt)
        return outcome.rowcount > 0

    async def record_client(self, verification_id: UUID, ip_address: str, user_agent: str) -> None:
        stmt = (
            update(Verification)
            .where(Verification.id == verification_id)
            .values(ip_address=ip_address, user_agent=user_agent)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

