"""SQLModel table exports."""

from .bill_customer import BillCustomer, Sale, SaleTransaction
from .cheque import Cheque
from .customer import Customer, Loan, LoanTransaction
from .firm import FirmAccount, FirmTransaction
from .mahajan import Bill, BillTransaction, Mahajan
from .partner import Partner, PartnerTransaction

__all__ = [
    "Bill",
    "BillCustomer",
    "BillTransaction",
    "Cheque",
    "Customer",
    "FirmAccount",
    "FirmTransaction",
    "Loan",
    "LoanTransaction",
    "Mahajan",
    "Partner",
    "PartnerTransaction",
    "Sale",
    "SaleTransaction",
]
