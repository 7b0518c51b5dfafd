"""
Sales Use Cases
"""

from .change_sale_status_use_case import ChangeSaleStatusUseCase
from .list_sales_use_case import ListSalesUseCase

__all__ = [
    "ChangeSaleStatusUseCase",
    "ListSalesUseCase",
]
