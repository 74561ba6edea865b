#!/usr/bin/env python3
"""
JSON schema validation for all static site configuration files.

This script validates all JSON configuration files against their corresponding schemas.
It's designed to be used as a pre-commit hook to ensure all configurations are valid.

Requires the project to be installed first (pip install -e .) so that
site_infra is importable.
"""

import logging
import sys

from site_infra.checks.config_schemas import PROJECT_ROOT, SCHEMA_MAPPINGS, validate_files_against_schema
from site_infra.configs.logging_cfg import setup_logging

logger = logging.getLogger("validate_all_configs")


def main():
    """Main validation function."""
    setup_logging()
    all_valid = True

    print("Validating JSON configuration files against schemas...")
    print()

    for schema_file, config_files in SCHEMA_MAPPINGS.items():
        schema_path = PROJECT_ROOT / schema_file
        config_paths = [PROJECT_ROOT / f for f in config_files]

        print(f"Validating against {schema_file}:")
        try:
            results = validate_files_against_schema(schema_path, config_paths)
        except Exception:
            logger.exception("Schema %s could not be loaded", schema_path)
            all_valid = False
            print()
            continue

        for config_file, errors in results.items():
            if errors:
                all_valid = False
                print(f"[X] {config_file}: {len(errors)} error(s)")
                for error in errors:
                    print(f"  - {error}")
            else:
                print(f"[OK] {config_file}: OK")
        print()

    if all_valid:
        print("All configuration files are valid! [OK]")
        sys.exit(0)
    else:
        print("Some configuration files have validation errors! [X]")
        sys.exit(1)


if __name__ == "__main__":
    main()
