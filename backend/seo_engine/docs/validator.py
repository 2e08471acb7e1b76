"""
SEO Engine Backend: Manifest Validation
==========================================

What:  Fail-fast consistency checks for the OpenAPI manifest.
Why:   A schema reference with no matching definition renders as a broken
       Swagger UI page. Catching it while the app is being built means the
       process refuses to start instead of serving a broken document.
How:   Walks the document once per check and raises ManifestError naming the
       offending JSON location and schema.

Checks (in order):
    1. `openapi` is a 3.0.x version string
    2. info.title and info.version are present
    3. every $ref points at a defined #/components/schemas/<Name>
    4. every operation tag is declared in the top-level `tags` list
    5. documented operations == route table operations (no more, no fewer)
"""

import re
from typing import Any, Dict, Iterable, Iterator, Set, Tuple

from seo_engine.docs.manifest import (
    HTTP_METHODS,
    SCHEMA_REF_PREFIX,
    Operation,
    document_operations,
)
from seo_engine.exceptions import ManifestError

_OPENAPI_30 = re.compile(r"^3\.0\.\d+$")


def _escape_pointer_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _unescape_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def iter_refs(node: Any, location: str = "") -> Iterator[Tuple[str, str]]:
    """Yield (json_pointer, ref) for every $ref in `node`."""
    if isinstance(node, dict):
        for key, value in node.items():
            child = f"{location}/{_escape_pointer_token(str(key))}"
            if key == "$ref" and isinstance(value, str):
                yield child, value
            else:
                yield from iter_refs(value, child)
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield from iter_refs(value, f"{location}/{index}")


def check_version(document: Dict[str, Any]) -> None:
    version = document.get("openapi")
    if not isinstance(version, str) or not _OPENAPI_30.match(version):
        raise ManifestError(
            f"Manifest must declare an OpenAPI 3.0.x version, got {version!r}",
            location="/openapi",
        )


def check_info(document: Dict[str, Any]) -> None:
    info = document.get("info")
    if not isinstance(info, dict):
        raise ManifestError("Manifest is missing the info object", location="/info")
    for field in ("title", "version"):
        if not info.get(field):
            raise ManifestError(
                f"Manifest info.{field} is missing or empty",
                location=f"/info/{field}",
            )


def check_refs(document: Dict[str, Any]) -> None:
    defined = set((document.get("components") or {}).get("schemas") or {})
    for location, ref in iter_refs(document):
        if not ref.startswith(SCHEMA_REF_PREFIX):
            raise ManifestError(
                f"Unsupported reference '{ref}' at {location}; "
                f"only {SCHEMA_REF_PREFIX}<Name> is allowed",
                location=location,
            )
        name = _unescape_pointer_token(ref[len(SCHEMA_REF_PREFIX):])
        if name not in defined:
            raise ManifestError(
                f"Schema '{name}' referenced at {location} has no definition "
                f"in components.schemas",
                location=location,
                schema=name,
            )


def check_tags(document: Dict[str, Any]) -> None:
    declared = {tag.get("name") for tag in document.get("tags") or []}
    for path, item in (document.get("paths") or {}).items():
        for method, operation in item.items():
            if method not in HTTP_METHODS:
                continue
            for tag in operation.get("tags") or []:
                if tag not in declared:
                    raise ManifestError(
                        f"Tag '{tag}' used by {method.upper()} {path} is not declared",
                        location=f"/paths/{_escape_pointer_token(path)}/{method}/tags",
                    )


def _format_operations(operations: Set[Operation]) -> str:
    return ", ".join(f"{method} {path}" for path, method in sorted(operations))


def check_route_table(document: Dict[str, Any], routes: Iterable[Operation]) -> None:
    expected = set(routes)
    documented = document_operations(document)
    missing = expected - documented
    extra = documented - expected
    if missing or extra:
        parts = []
        if missing:
            parts.append(f"undocumented routes: {_format_operations(missing)}")
        if extra:
            parts.append(f"documented but not routed: {_format_operations(extra)}")
        raise ManifestError(
            "Manifest does not match the route table (" + "; ".join(parts) + ")",
            location="/paths",
            context={
                "missing": sorted(f"{m} {p}" for p, m in missing),
                "extra": sorted(f"{m} {p}" for p, m in extra),
            },
        )


def validate_manifest(document: Dict[str, Any], routes: Iterable[Operation]) -> None:
    """
    Run every consistency check against `document`.

    Args:
        document: OpenAPI document as a plain dict.
        routes:   (path, METHOD) pairs from the route table.

    Raises:
        ManifestError: on the first inconsistency found.
    """
    check_version(document)
    check_info(document)
    check_refs(document)
    check_tags(document)
    check_route_table(document, routes)
