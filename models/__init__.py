from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .supplier import Supplier, SupplierProduct
from .customer import Customer, CustomerProduct
from .inventory import InventoryItem
from .cash import CashTransaction
from .returns import ProductReturn, ReturnItem
