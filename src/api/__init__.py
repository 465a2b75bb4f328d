"""
API Package
Contains FastAPI routes and models
"""

from api.routes import router, get_processor
from api.models import (
    LineItemModel,
    ParseTextRequest,
    ParseResponse,
    HealthResponse,
    ErrorResponse
)

__all__ = [
    'router',
    'get_processor',
    'LineItemModel',
    'ParseTextRequest',
    'ParseResponse',
    'HealthResponse',
    'ErrorResponse'
]
