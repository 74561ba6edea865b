#!/usr/bin/env python3
"""
Run the static site template rules against synthesized CloudFormation templates.

Run `cdk synth` first; by default every cdk.out/*.template.json is checked.
Exits with status 1 when any rule reports a finding.

Requires the project to be installed first (pip install -e .) so that
site_infra is importable.
"""

import argparse
import logging
import sys
from pathlib import Path

from site_infra.checks.template_rules import RULES, load_template, run_all
from site_infra.configs.logging_cfg import setup_logging

logger = logging.getLogger("check_template")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument("templates", nargs="*", help="template files (default: cdk.out/*.template.json)")
    ap.add_argument("--cdk-out", default="cdk.out", help="cloud assembly directory")
    ap.add_argument("--log-level", default=None)
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level)

    templates = [Path(t) for t in args.templates] or sorted(Path(args.cdk_out).glob("*.template.json"))
    if not templates:
        logger.error("No templates found under %s, run `cdk synth` first", args.cdk_out)
        sys.exit(1)

    bad = False
    for path in templates:
        logger.debug("Checking %s against %d rule(s)", path, len(RULES))
        findings = run_all(load_template(path))
        if findings:
            bad = True
            print(f"[X] {path}: {len(findings)} finding(s)")
            for finding in findings:
                print(f"  - {finding}")
        else:
            print(f"[OK] {path}: OK")

    sys.exit(1 if bad else 0)


if __name__ == "__main__":
    main()
