import json
import os

from contentkosh_api.api.main import app

# Get the OpenAPI schema (REST routes are under /api, health at the root)
openapi_schema = app.openapi()

# Document the bearer scheme even for routes that resolve the token lazily
components = openapi_schema.setdefault("components", {})
components.setdefault("securitySchemes", {})["HTTPBearer"] = {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}

# Write to file
output_dir = "interfaces"
os.makedirs(output_dir, exist_ok=True)
output_path = os.path.join(output_dir, "openapi.json")

with open(output_path, "w") as f:
    json.dump(openapi_schema, f, indent=2)
