"""
SEO Engine Backend: API Document Manifest
============================================

What:  Builds the OpenAPI manifest for the route table and pins it on the app.
Why:   The documentation mount must serve one consistent, OpenAPI 3.0.x
       document for the whole process lifetime.
How:   FastAPI reflects over the registered routes and pydantic models
       (get_openapi). Pydantic emits JSON Schema 2020-12 / OpenAPI 3.1
       fragments, so each schema is rewritten into its 3.0 equivalent
       before the document is frozen into an ApiDocumentManifest.
When:  Once, inside create_app(), after every router has been included.

3.1 → 3.0 rewrites:
    anyOf [X, {"type": "null"}]    →  X + nullable: true
    type: ["string", "null"]      →  type: string + nullable: true
    const: v                      →  enum: [v]
    exclusiveMinimum: 5           →  minimum: 5 + exclusiveMinimum: true
    examples: [a, b]              →  example: a
"""

import copy
import json
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple, Type

from fastapi import APIRouter, FastAPI
from fastapi.openapi.utils import get_openapi
from fastapi.routing import APIRoute
from pydantic import BaseModel

from seo_engine.config import Settings
from seo_engine.schemas.health import ErrorResponse

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"

TAGS_METADATA: List[Dict[str, str]] = [
    {"name": "Health", "description": "Health check endpoints"},
]

# Models published under components.schemas even though no route returns them
EXTRA_SCHEMAS: Tuple[Type[BaseModel], ...] = (ErrorResponse,)

SCHEMA_REF_PREFIX = "#/components/schemas/"

Operation = Tuple[str, str]


class ApiDocumentManifest:
    """
    Read-only OpenAPI document for the running process.

    The document is deep-copied on the way in and on the way out, so no
    caller can mutate what the documentation mount serves.
    """

    def __init__(self, document: Dict[str, Any]):
        self._document = copy.deepcopy(document)

    @property
    def openapi_version(self) -> str:
        return self._document.get("openapi", "")

    @property
    def title(self) -> str:
        return self._document.get("info", {}).get("title", "")

    @property
    def version(self) -> str:
        return self._document.get("info", {}).get("version", "")

    @property
    def schema_names(self) -> Set[str]:
        return set(self._document.get("components", {}).get("schemas", {}))

    def operations(self) -> Set[Operation]:
        """(path, METHOD) pairs described by the document."""
        return document_operations(self._document)

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._document)

    def to_json(self) -> str:
        return json.dumps(self._document, indent=2, sort_keys=False)

    def __repr__(self) -> str:
        return (
            f"ApiDocumentManifest(openapi={self.openapi_version!r}, "
            f"title={self.title!r}, operations={len(self.operations())})"
        )


# ══════════════════════════════════════════════════════════════════════════
# Route table
# ══════════════════════════════════════════════════════════════════════════

HTTP_METHODS = {"get", "put", "post", "delete", "options", "head", "patch", "trace"}


def include_routers(app: FastAPI, *routers: APIRouter) -> None:
    """
    Include `routers` on `app` and remember them for the manifest.

    The route table is read back from these routers rather than from
    app.routes alone: depending on the FastAPI release, include_router()
    either copies each APIRoute into app.routes or adds one wrapper entry
    for the whole router.
    """
    for router in routers:
        app.include_router(router)
    app.state.routers = [*getattr(app.state, "routers", []), *routers]


def documented_routes(app: FastAPI) -> List[APIRoute]:
    """Routes that belong in the manifest (docs mount routes are excluded)."""
    included = [route for router in getattr(app.state, "routers", []) for route in router.routes]
    found: List[APIRoute] = []
    seen: Set[Tuple[str, FrozenSet[str]]] = set()
    for route in [*included, *app.routes]:
        if not isinstance(route, APIRoute) or not route.include_in_schema:
            continue
        # Flattening releases list an included route twice
        key = (route.path_format, frozenset(route.methods))
        if key in seen:
            continue
        seen.add(key)
        found.append(route)
    return found


def route_table_operations(app: FastAPI) -> Set[Operation]:
    return {
        (route.path_format, method.upper())
        for route in documented_routes(app)
        for method in route.methods
    }


def document_operations(document: Dict[str, Any]) -> Set[Operation]:
    return {
        (path, method.upper())
        for path, item in (document.get("paths") or {}).items()
        for method in item
        if method in HTTP_METHODS
    }


# ══════════════════════════════════════════════════════════════════════════
# OpenAPI 3.1 → 3.0 schema rewriting
# ══════════════════════════════════════════════════════════════════════════

def _is_null_schema(schema: Any) -> bool:
    return isinstance(schema, dict) and schema.get("type") == "null"


def _collapse_nullable_union(schema: Dict[str, Any], keyword: str) -> Dict[str, Any]:
    variants = schema[keyword]
    non_null = [v for v in variants if not _is_null_schema(v)]
    if len(non_null) == len(variants):
        return schema

    rest = {k: v for k, v in schema.items() if k != keyword}
    if len(non_null) == 1:
        only = non_null[0]
        if "$ref" in only:
            # $ref siblings are ignored in 3.0, wrap it so nullable sticks
            merged = {**rest, "allOf": [only]}
        else:
            merged = {**only, **rest}
    else:
        merged = {**rest, keyword: non_null}
    merged["nullable"] = True
    return merged


def downgrade_schema(schema: Any) -> Any:
    """Rewrite one JSON Schema (and its subschemas) into OpenAPI 3.0 form."""
    if isinstance(schema, list):
        return [downgrade_schema(s) for s in schema]
    if not isinstance(schema, dict):
        return schema

    out: Dict[str, Any] = {}
    for key, value in schema.items():
        if key in ("properties", "patternProperties", "$defs", "definitions"):
            out[key] = {name: downgrade_schema(sub) for name, sub in value.items()}
        elif key in ("items", "not", "additionalProperties", "allOf", "anyOf", "oneOf"):
            out[key] = downgrade_schema(value)
        elif key == "prefixItems":
            # 3.0 has no tuple validation
            out["items"] = downgrade_schema(value[0]) if len(value) == 1 else {"anyOf": downgrade_schema(value)}
        else:
            out[key] = value

    for keyword in ("anyOf", "oneOf"):
        if keyword in out:
            out = _collapse_nullable_union(out, keyword)

    type_ = out.get("type")
    if isinstance(type_, list):
        types = [t for t in type_ if t != "null"]
        if len(types) < len(type_):
            out["nullable"] = True
        if len(types) == 1:
            out["type"] = types[0]
        else:
            del out["type"]
            out["anyOf"] = [{"type": t} for t in types]

    if "const" in out:
        out["enum"] = [out.pop("const")]

    for bound, plain in (("exclusiveMinimum", "minimum"), ("exclusiveMaximum", "maximum")):
        value = out.get(bound)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            out[plain] = value
            out[bound] = True

    examples = out.get("examples")
    if isinstance(examples, list):
        del out["examples"]
        if examples:
            out["example"] = examples[0]

    return out


def _downgrade_schema_slots(node: Any) -> Any:
    """Walk non-schema OpenAPI objects and rewrite every `schema` slot found."""
    if isinstance(node, list):
        return [_downgrade_schema_slots(n) for n in node]
    if not isinstance(node, dict):
        return node
    return {
        key: downgrade_schema(value) if key == "schema" and isinstance(value, dict)
        else _downgrade_schema_slots(value)
        for key, value in node.items()
    }


def downgrade_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of `document` expressed as OpenAPI 3.0."""
    doc = copy.deepcopy(document)
    doc["openapi"] = OPENAPI_VERSION
    if "paths" in doc:
        doc["paths"] = _downgrade_schema_slots(doc["paths"])
    components = doc.get("components")
    if components:
        schemas = components.get("schemas")
        if schemas:
            components["schemas"] = {name: downgrade_schema(s) for name, s in schemas.items()}
        for section in ("responses", "parameters", "requestBodies", "headers"):
            if section in components:
                components[section] = _downgrade_schema_slots(components[section])
    doc.pop("webhooks", None)
    doc.get("info", {}).pop("summary", None)
    return doc


# ══════════════════════════════════════════════════════════════════════════
# Build & install
# ══════════════════════════════════════════════════════════════════════════

def _model_component(model: Type[BaseModel]) -> Dict[str, Dict[str, Any]]:
    """Schema for `model` plus any nested models it pulls in, keyed by name."""
    schema = model.model_json_schema(ref_template=SCHEMA_REF_PREFIX + "{model}")
    nested = schema.pop("$defs", {})
    return {**nested, model.__name__: schema}


def build_manifest(
    app: FastAPI,
    config: Settings,
    tags: Optional[Sequence[Dict[str, str]]] = None,
    extra_schemas: Iterable[Type[BaseModel]] = EXTRA_SCHEMAS,
) -> ApiDocumentManifest:
    """
    Derive the OpenAPI 3.0 manifest from the app's route table.

    Args:
        app:            FastAPI app with every router already included.
        config:         Settings supplying info.title / version / description.
        tags:           Tag metadata; defaults to TAGS_METADATA.
        extra_schemas:  Models to publish under components.schemas even when
                        no route references them (e.g. the error envelope).

    Returns:
        ApiDocumentManifest, not yet validated.
    """
    raw = get_openapi(
        title=config.api_title,
        version=config.api_version,
        description=config.api_description,
        routes=documented_routes(app),
        tags=list(tags if tags is not None else TAGS_METADATA),
        separate_input_output_schemas=False,
    )

    schemas = raw.setdefault("components", {}).setdefault("schemas", {})
    for model in extra_schemas:
        for name, schema in _model_component(model).items():
            schemas.setdefault(name, schema)

    document = downgrade_document(raw)
    manifest = ApiDocumentManifest(document)
    logger.debug("Built %r", manifest)
    return manifest


def install_manifest(app: FastAPI, manifest: ApiDocumentManifest) -> None:
    """
    Pin `manifest` as the document served at the OpenAPI URL.

    Replaces app.openapi, the override hook the OpenAPI route calls, so the
    reflection pass never runs again after startup even when routes are
    added later.
    """
    app.openapi_version = manifest.openapi_version
    app.openapi = manifest.as_dict
    app.state.manifest = manifest
