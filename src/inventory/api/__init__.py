from inventory.api.routes import get_engine, inventory_router

__all__ = ["inventory_router", "get_engine"]
