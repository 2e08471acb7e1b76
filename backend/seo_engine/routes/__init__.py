# Routes package init
"""
SEO Engine Backend: API Routes Package
=========================================

What:  HTTP route handlers that make up the route table.
How:   Each route module exposes an APIRouter; main.create_app() includes them.

Route Inventory:
    - health.py:  GET /health   (liveness probe)

The documentation mount (Swagger UI and the OpenAPI document) is not a
router here; FastAPI serves it from the URLs configured in settings, and
seo_engine.docs builds the document it returns.
"""
