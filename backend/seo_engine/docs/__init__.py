# Docs package init
"""
SEO Engine Backend: Documentation Registry
=============================================

What:  Builds, validates, and installs the OpenAPI manifest served by the
       documentation mount.
How:   register_documentation() is the one call create_app() makes:
       build → validate → install. Any inconsistency raises ManifestError
       before the app is returned, so the server never starts with a broken
       document.

Mount (served by FastAPI from settings):
    - GET {docs_url}                  Swagger UI page
    - GET {docs_url}/oauth2-redirect  Swagger UI OAuth2 helper
    - GET {openapi_url}               The manifest as JSON
"""

import logging

from fastapi import FastAPI

from seo_engine.config import Settings
from seo_engine.docs.manifest import (
    ApiDocumentManifest,
    build_manifest,
    include_routers,
    install_manifest,
    route_table_operations,
)
from seo_engine.docs.validator import validate_manifest
from seo_engine.exceptions import ManifestError

logger = logging.getLogger(__name__)

__all__ = [
    "ApiDocumentManifest",
    "build_manifest",
    "include_routers",
    "install_manifest",
    "register_documentation",
    "validate_manifest",
]


def register_documentation(app: FastAPI, config: Settings) -> ApiDocumentManifest:
    """Build, validate, and pin the manifest on `app`."""
    manifest = build_manifest(app, config)
    try:
        validate_manifest(manifest.as_dict(), route_table_operations(app))
    except ManifestError as e:
        logger.error("API documentation manifest is invalid: %s | Context: %s", e.message, e.context)
        raise
    install_manifest(app, manifest)
    logger.info(
        "Documentation registered: %d operation(s), %d schema(s), OpenAPI %s",
        len(manifest.operations()),
        len(manifest.schema_names),
        manifest.openapi_version,
    )
    return manifest
