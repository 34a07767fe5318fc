# Tenancy
from app.models.tenancy.company_models import Company

# Masters
from app.models.masters.supplier_models import Supplier
from app.models.masters.category_models import ProductCategory
from app.models.masters.product_models import Product

# Inventory
from app.models.inventory.warehouse_models import Warehouse
from app.models.inventory.inventory_models import InventoryRecord
from app.models.inventory.inventory_movement_models import InventoryMovement

# Sales
from app.models.sales.sales_models import SalesFact
