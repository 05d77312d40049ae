"""
Generate a combined OpenAPI schema from all services.

The combined document is what client code generators consume; paths are
prefixed with /api/v1 to match how the services are exposed publicly.

Usage:
    python scripts/generate_openapi.py > openapi.json
"""

import json
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.clubs_service.app.main import app as clubs_app  # noqa: E402
from services.messaging_service.app.main import app as messaging_app  # noqa: E402
from services.volunteer_service.app.main import app as volunteer_app  # noqa: E402


def merge_openapi_schemas():
    """Merge OpenAPI schemas from all services into one document."""
    combined = {
        "openapi": "3.1.0",
        "info": {
            "title": "Club Volunteers API",
            "description": "Combined API schema for the clubs, volunteer and messaging services.",
            "version": "0.1.0",
        },
        "paths": {},
        "components": {"schemas": {}},
    }

    services = [
        ("clubs", clubs_app),
        ("volunteer", volunteer_app),
        ("messaging", messaging_app),
    ]

    for prefix, app in services:
        schema = app.openapi()

        for path, operations in schema.get("paths", {}).items():
            # Every service exposes /health; keep them apart
            if path == "/health":
                path = f"/{prefix}/health"
            combined["paths"][f"/api/v1{path}"] = operations

        for name, definition in schema.get("components", {}).get("schemas", {}).items():
            existing = combined["components"]["schemas"].get(name)
            if existing is not None and existing != definition:
                print(
                    f"Warning: schema {name!r} differs between services, keeping the first",
                    file=sys.stderr,
                )
                continue
            combined["components"]["schemas"][name] = definition

    return combined


if __name__ == "__main__":
    schema = merge_openapi_schemas()
    print(json.dumps(schema, indent=2))
