from marketplace.repositories.orders import DocumentOrdersRepository
from marketplace.repositories.suppliers import DocumentSuppliersRepository
from marketplace.repositories.tariffs import DocumentTariffsRepository
from marketplace.repositories.users import DocumentUsersRepository

__all__ = [
    "DocumentOrdersRepository",
    "DocumentSuppliersRepository",
    "DocumentTariffsRepository",
    "DocumentUsersRepository",
]
