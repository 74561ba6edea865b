"""
Bucket policy builders for the static site CDK project.

This module turns JSON policy documents into statements on a bucket's
resource policy. Documents live under configs/iam/policies and may use
${Var} placeholders, which are expanded with the stack variables plus any
construct-specific values (bucket ARN, origin access identity id).
"""

from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from site_infra.configs.config_manager import ConfigManager
from site_infra.configs.error_handler import ErrorHandler

logger = logging.getLogger(__name__)

def _ensure_list(obj: Any) -> List[Any]:
    """
    Ensure obj is a list, wrapping it if it's a single item.

    Args:
        obj: Object to ensure is a list

    Returns:
        List containing the object or the object itself if already a list
    """
    if isinstance(obj, list):
        return obj
    return [obj]

def _validate_config(raw: dict) -> None:
    """
    Validate bucket policy configuration structure.

    Args:
        raw: Policy configuration dictionary

    Raises:
        ValueError: If configuration structure is invalid
        TypeError: If a statement is not an object
    """
    ErrorHandler.validate_type(raw, dict, "policy config", "Policy")

    extra = set(raw.keys()) - {"statements"}
    if extra:
        raise ValueError(f"Unknown keys in policy config: {', '.join(sorted(extra))}")

    statements = _ensure_list(raw.get("statements", []))
    ErrorHandler.validate_list_not_empty(statements, "statements", "Policy")

    for i, s in enumerate(statements):
        ErrorHandler.validate_type(s, dict, f"statement #{i}", "Policy")

        # Resource policies always name a principal
        ErrorHandler.validate_required_fields(
            s,
            ["Effect", "Principal", "Action"],
            f"Statement #{i}"
        )
        ErrorHandler.validate_enum_value(s["Effect"], ["Allow", "Deny"], "Effect", f"Statement #{i}")

        if "Resource" not in s and "NotResource" not in s:
            raise ValueError(f"Statement #{i} must include Resource or NotResource")

def build_statements(raw: dict) -> List[iam.PolicyStatement]:
    """
    Validate a policy document and convert it to IAM statements.

    Args:
        raw: Policy configuration with a "statements" list

    Returns:
        One PolicyStatement per JSON statement, in order
    """
    _validate_config(raw)
    return [iam.PolicyStatement.from_json(s) for s in _ensure_list(raw["statements"])]

def apply_policy_to_bucket(
        bucket: s3.IBucket,
        filename: str,
        extra_vars: Optional[Mapping[str, str]] = None
    ) -> List[iam.PolicyStatement]:
    """
    Add the statements of a JSON policy file to a bucket's resource policy.

    The JSON file should have this structure:
    {
      "statements": [
        {
          "Effect": "Allow",
          "Principal": {"AWS": "arn:${Partition}:iam::cloudfront:user/CloudFront Origin Access Identity ${OaiId}"},
          "Action": "s3:GetObject",
          "Resource": "${SiteBucketArn}/*"
        }
      ]
    }

    Statements are merged into the bucket's single policy, so other grants on
    the same bucket (e.g. auto-delete of objects) keep working.

    Args:
        bucket: Bucket whose resource policy receives the statements
        filename: Policy config filename under configs/iam/policies
        extra_vars: Additional placeholder values

    Returns:
        The statements that were added

    Raises:
        ValueError: If policy configuration is invalid
        FileNotFoundError: If policy file is not found
    """
    config_mgr = ConfigManager(bucket.stack, extra_vars)
    raw = config_mgr.load_config("policies", filename)

    statements = build_statements(raw)
    for statement in statements:
        bucket.add_to_resource_policy(statement)

    logger.info("Applied %d statement(s) from %s to bucket policy", len(statements), filename)
    return statements
