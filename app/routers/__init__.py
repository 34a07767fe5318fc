# app/routers/__init__.py

from .masters.product_router import router as product_router

from .alerts.alert_router import router as alert_router


__all__ = [
"product_router",

"alert_router",
]
