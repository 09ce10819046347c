from .stock_movement import StockMovement
from .warehouse_stock import WarehouseStock

__all__ = ["StockMovement", "WarehouseStock"]
