"""
List Sales Use Case
"""

from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.workflow.config_loader import load_workflow_config
from src.domain.workflow import SALE_STATUS_LABELS, is_editable, is_visible
from src.libs.result import Result, Return
from .dtos import SaleListResponse, SaleSummary


class ListSalesUseCase:
    """
    Use case for listing the sales a role may see.

    Business Rules:
    - Sales in states hidden from the caller's role are left out
    - Each entry says whether the caller may edit it
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, company_id: UUID, role: str) -> Result[SaleListResponse]:
        async with self.uow:
            loaded = await load_workflow_config(self.uow, company_id)
            if loaded.is_err():
                return loaded
            config = loaded.value

            sales = await self.uow.sales.list_by_company(company_id)
            return Return.ok(
                SaleListResponse(
                    sales=[
                        SaleSummary(
                            id=sale.id,
                            status=sale.status,
                            status_label=SALE_STATUS_LABELS.get(sale.status, sale.status),
                            editable=is_editable(config, sale.status, role),
                            created_at=sale.created_at,
                            updated_at=sale.updated_at,
                        )
                        for sale in sales
                        if is_visible(config, sale.status, role)
                    ]
                )
            )
