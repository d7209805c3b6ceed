"""Domain models for mc_product — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Product:
    id: int
    name: str
    price: Decimal
    last_updated: datetime


@dataclass
class NewProduct:
    """Validated input for an insert; id and last_updated are assigned on write."""

    name: str
    price: Decimal
