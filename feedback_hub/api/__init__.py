"""
FastAPI feedback-hub service.

Provides REST API for feedback collections with:
- POST /feedbacks - Create a collection and issue its API key
- GET/PATCH /feedbacks[/{key}] - Admin listing, lookup and updates
- GET /health - Service health check
"""

from feedback_hub.api.app import create_app

__all__ = ["create_app"]
