"""Concrete repository implementations using SQLModel."""

from .bill_customer import SQLModelBillCustomerRepository
from .cheque import SQLModelChequeRepository
from .customer import SQLModelCustomerRepository
from .firm import SQLModelFirmAccountRepository
from .mahajan import SQLModelMahajanRepository
from .partner import SQLModelPartnerRepository

__all__ = [
    "SQLModelBillCustomerRepository",
    "SQLModelChequeRepository",
    "SQLModelCustomerRepository",
    "SQLModelFirmAccountRepository",
    "SQLModelMahajanRepository",
    "SQLModelPartnerRepository",
]
