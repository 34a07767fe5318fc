# app/models/enums/inventory_movement_type.py

import enum


class InventoryMovementType(str, enum.Enum):
    in_ = "in"
    out = "out"
    adjustment = "adjustment"
    transfer = "transfer"
