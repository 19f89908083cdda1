"""
pokersim Server - FastAPI + WebSocket Server Layer
"""

from pokersim.server.app import app, create_app

__all__ = ["app", "create_app"]
