"""Schema loading utility."""

import json
from pathlib import Path

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


def load_schema(path: Path) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)


def load_packaged_schema(name: str) -> dict:
    """Load a schema shipped in the package's ``schemas`` directory."""
    return load_schema(SCHEMAS_DIR / f"{name}.json")
