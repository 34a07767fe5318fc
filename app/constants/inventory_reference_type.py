# app/constants/inventory_reference_type.py

from enum import Enum


class InventoryReferenceType(str, Enum):
    """What caused an inventory movement; stored with the movement's reference id."""

    INITIAL_STOCK = "initial_stock"
