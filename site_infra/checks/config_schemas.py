"""
JSON schema validation for the project's configuration files.

Every shipped config file is mapped to the schema it must satisfy. The
scripts under scripts/ use these helpers as a pre-commit check.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, List

from jsonschema import Draft202012Validator

PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Schema to config file mappings, relative to the project root
SCHEMA_MAPPINGS: Dict[str, List[str]] = {
    "schema/distribution.schema.json": ["site_infra/configs/distribution/default.json"],
    "schema/policy.schema.json": ["site_infra/configs/iam/policies/site_bucket.json"],
}


def load_json(path: Path) -> dict:
    """Load and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def schema_errors(validator: Draft202012Validator, data: dict) -> List[str]:
    """Return "path: message" strings for every schema violation, sorted by path."""
    errors = sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path)))
    return [f"{'/'.join(map(str, e.path)) or '(root)'}: {e.message}" for e in errors]


def validate_files_against_schema(schema_path: Path, config_files: List[Path]) -> Dict[Path, List[str]]:
    """
    Validate a list of config files against a schema.

    Args:
        schema_path: Path to the JSON schema
        config_files: Files to validate

    Returns:
        Mapping of file to its errors; files that pass map to an empty list

    Raises:
        FileNotFoundError: If the schema does not exist
        json.JSONDecodeError: If the schema is not valid JSON
    """
    schema = load_json(schema_path)
    Draft202012Validator.check_schema(schema)
    validator = Draft202012Validator(schema)

    results: Dict[Path, List[str]] = {}
    for config_file in config_files:
        if not config_file.is_file():
            results[config_file] = ["File not found"]
            continue
        try:
            data = load_json(config_file)
        except json.JSONDecodeError as e:
            results[config_file] = [f"unreadable JSON ({e})"]
            continue
        results[config_file] = schema_errors(validator, data)

    return results
