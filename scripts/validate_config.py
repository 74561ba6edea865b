#!/usr/bin/env python3
"""
Validate JSON files against a JSON schema.

Usage: python scripts/validate_config.py --schema schema/policy.schema.json FILE...

Requires the project to be installed first (pip install -e .) so that
site_infra is importable.
"""

import argparse
import sys
from pathlib import Path

from site_infra.checks.config_schemas import validate_files_against_schema

ap = argparse.ArgumentParser(description="Validate JSON files against a JSON schema")
ap.add_argument("--schema", required=True)
ap.add_argument("files", nargs="+")
args = ap.parse_args()

results = validate_files_against_schema(Path(args.schema), [Path(f) for f in args.files])

bad = False
for f, errs in results.items():
    if errs:
        bad = True
        print(f"[✗] {f}: {len(errs)} error(s)")
        for e in errs:
            print(f"  • {e}")
    else:
        print(f"[✓] {f}: OK")
sys.exit(1 if bad else 0)
