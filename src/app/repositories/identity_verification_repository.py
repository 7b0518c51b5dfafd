from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import SignatureIdentityVerification, VerificationResult


class IIdentityVerificationRepository(ABC):
    """SignatureIdentityVerification repository interface - application layer"""

    @abstractmethod
    async def create(
        self, verification: SignatureIdentityVerification
    ) -> SignatureIdentityVerification:
        """Create a new verification record"""
        pass

    @abstractmethod
    async def get_latest_pending(
        self, signature_link_id: UUID
    ) -> Optional[SignatureIdentityVerification]:
        """Most recently created pending record of a signature link"""
        pass

    @abstractmethod
    async def supersede_pending(self, signature_link_id: UUID, keep_id: UUID) -> int:
        """
        Mark every other pending record of the link as superseded.

        Returns:
            Number of records superseded
        """
        pass

    @abstractmethod
    async def register_attempt(
        self, verification_id: UUID, ip_address: str, user_agent: str
    ) -> Optional[int]:
        """
        Atomically increment attempts if the record is pending and below
        max_attempts.

        Returns:
            New attempts value, or None when no attempt was left
        """
        pass

    @abstractmethod
    async def mark_result(
        self,
        verification_id: UUID,
        result: VerificationResult,
        verified_at: Optional[datetime] = None,
    ) -> bool:
        """
        Move a pending record to `result`.

        Returns:
            False when the record was no longer pending
        """
        pass

    @abstractmethod
    async def record_client(self, verification_id: UUID, ip_address: str, user_agent: str) -> None:
        """Overwrite requester IP and user agent"""
        pass
