"""
SEO Engine Backend: Application Package Initializer
=====================================================

What: Marks the `seo_engine` directory as a Python package.
Why:  Enables module imports like `from seo_engine.config import settings`.
Who:  Used by uvicorn, pytest, and the `seo-engine` console script.

Architecture Note:
    The service is a thin documented REST template:

    ┌─────────────────────────────────────┐
    │        Routes (Route Table)         │  ← GET /health
    ├─────────────────────────────────────┤
    │   Docs (Documentation Registry)     │  ← OpenAPI manifest + Swagger UI
    ├─────────────────────────────────────┤
    │      Schemas (API contracts)        │  ← Pydantic response models
    └─────────────────────────────────────┘

    There is no persistence layer; every request is a stateless
    request/response pair.
"""

__version__ = "1.0.0"
