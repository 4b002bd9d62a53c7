"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags.
"""

from fastapi import APIRouter

from tenantops.api.v1.endpoints import credentials, health, setup_links, tenants

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(credentials.router, prefix="/tenants", tags=["credentials"])
api_router.include_router(setup_links.router, prefix="/setup-links", tags=["setup-links"])
