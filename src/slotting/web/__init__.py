"""FastAPI REST API for warehouse slot allocation.

Usage:
    SLOTTING_CONFIG=warehouse.json uvicorn slotting.web:app --reload
"""

from slotting.web.app import app, create_app

__all__ = ["app", "create_app"]
