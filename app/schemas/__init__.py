"""
Schemas module - Request/Response schemas for API endpoints.

Everything lives in app.schemas.schemas:
- Enums shared by routes and services (roles, statuses, tiers)
- Request schemas (what API accepts)
- Response schemas (what API returns)
"""
