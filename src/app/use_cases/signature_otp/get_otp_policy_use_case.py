"""
Get OTP Policy Use Case

Tells the signer page which channels it may offer for a sale.
"""

from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import CompanyOtpPolicy
from src.libs.result import Error, Result, Return
from .dtos import SignerOtpPolicyResponse, parse_ids


class GetOtpPolicyUseCase:
    """
    Use case for reading the OTP policy of the company owning a sale.

    Business Rules:
    - Companies without a stored policy get the defaults
      (email only, WhatsApp disabled)
    - Never exposes SMTP parameters
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, sale_id: Optional[str]) -> Result[SignerOtpPolicyResponse]:
        if not sale_id:
            return Return.err(Error("MISSING_FIELDS", "Missing required fields: sale_id"))
        ids, invalid = parse_ids({"sale_id": sale_id})
        if invalid:
            return Return.err(
                Error("INVALID_FIELDS", "Invalid identifiers: sale_id", {"invalid_fields": invalid})
            )

        async with self.uow:
            sale = await self.uow.sales.get_by_id(ids["sale_id"])
            if sale is None:
                return Return.err(Error("SALE_NOT_FOUND", "Sale not found"))

            policy = await self.uow.otp_policies.get_by_company_id(sale.company_id)
            if policy is None:
                policy = CompanyOtpPolicy.default_for(sale.company_id)

            return Return.ok(
                SignerOtpPolicyResponse(
                    require_otp=policy.require_otp_for_signature,
                    allowed_channels=list(policy.allowed_channels),
                    default_channel=policy.default_channel,
                    whatsapp_enabled=policy.whatsapp_otp_enabled,
                )
            )
