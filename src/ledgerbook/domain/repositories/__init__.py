"""Repository protocol definitions for domain layer."""

from .bill_customer import BillCustomerRepository
from .cheque import ChequeRepository
from .customer import CustomerRepository
from .firm import FirmAccountRepository
from .mahajan import MahajanRepository
from .partner import PartnerRepository

__all__ = [
    "BillCustomerRepository",
    "ChequeRepository",
    "CustomerRepository",
    "FirmAccountRepository",
    "MahajanRepository",
    "PartnerRepository",
]
