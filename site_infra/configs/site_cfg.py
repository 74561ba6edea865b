"""
Project configuration management for the static site CDK project.

This module provides configuration classes and utilities for managing project-wide
settings, environment configurations, and context variables. It handles loading
configuration from cdk.json and provides type-safe access to configuration values.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union
from aws_cdk import App, Stack
from functools import lru_cache
from site_infra.configs.error_handler import ErrorHandler

DEFAULT_REGION = "us-east-1"
DEFAULT_ENV = "dev"

@dataclass(frozen=True)
class EnvCfg:
    """
    Environment configuration settings.

    Attributes:
        name: Environment name
        region: AWS region the stack is deployed to
        account_id: Optional AWS account ID, resolved by the CLI when unset
        force_destroy: Whether buckets and their objects are deleted with the stack
    """
    name: str
    region: str
    account_id: Optional[str] = None
    force_destroy: bool = True

@dataclass(frozen=True)
class SiteCfg:
    """
    Main project configuration container.

    Attributes:
        base_name: Prefix shared by every bucket name
        env: Environment configuration
        content_dir: Optional directory uploaded to the site bucket
        comment: Label used for the origin access identity and distribution
    """
    base_name: str
    env: EnvCfg
    content_dir: Optional[str] = None
    comment: Optional[str] = None

    @property
    def log_bucket_name(self) -> str:
        return f"{self.base_name}-logs"

    @property
    def site_bucket_name(self) -> str:
        return f"{self.base_name}-site"

    @property
    def resolved_comment(self) -> str:
        return self.comment or f"{self.base_name} static site"

    def vars(
            self,
            stack: Stack,
            extra: dict[str, str] | None = None
        ) -> dict[str, str]:
        """
        Generate placeholder variables for JSON configuration expansion.

        Args:
            stack: CDK stack instance
            extra: Additional variables to include

        Returns:
            Dictionary of variable name to value mappings
        """
        base = {
            "BaseName": self.base_name,
            "EnvName": self.env.name,
            "AccountId": stack.account or self.env.account_id or "",
            "Region": stack.region or self.env.region,
            "Partition": stack.partition,          # aws / aws-cn / aws-us-gov
            "LogBucketName": self.log_bucket_name,
            "SiteBucketName": self.site_bucket_name,
        }
        if extra:
            base.update({k: str(v) for k, v in extra.items()})

        return base

def _node(obj: Union[App, Stack]):
    """
    Get the CDK node from an App or Stack.

    Args:
        obj: CDK App or Stack instance

    Returns:
        CDK node instance
    """
    return (obj if isinstance(obj, App) else Stack.of(obj)).node

@lru_cache(maxsize=8)
def get_cfg(obj: Union[App, Stack]) -> SiteCfg:
    """
    Load project configuration from cdk.json context.

    Reads the "site" context once, applies overrides (-c site.env=...,
    -c site.region=...), and validates.

    Args:
        obj: CDK App or Stack instance

    Returns:
        Validated project configuration

    Raises:
        ValueError: If required context keys are missing or invalid
        TypeError: If the selected environment block is not an object
    """
    node = _node(obj)
    ctx = node.try_get_context("site") or {}
    env_name = (node.try_get_context("site.env") or ctx.get("env") or DEFAULT_ENV).lower()

    env_ctx = ctx.get(env_name) or {}
    ErrorHandler.validate_type(env_ctx, dict, env_name, "cdk.json")
    region = (
        node.try_get_context("site.region")
        or env_ctx.get("region")
        or ctx.get("region")
        or DEFAULT_REGION
    )
    account_id = env_ctx.get("account_id")
    force_destroy = env_ctx.get("force_destroy", env_name != "main")

    base_name = node.try_get_context("site.base_name") or ctx.get("base_name")

    # Validate required configuration
    missing = []
    if not base_name:
        missing.append("site.base_name")

    ErrorHandler.validate_context_keys(missing, "cdk.json")
    ErrorHandler.validate_boolean(force_destroy, f"{env_name}.force_destroy", "cdk.json")
    ErrorHandler.validate_bucket_name(f"{base_name}-logs", "cdk.json")
    ErrorHandler.validate_bucket_name(f"{base_name}-site", "cdk.json")

    return SiteCfg(
        base_name=base_name,
        env=EnvCfg(
            name=env_name,
            region=region,
            account_id=account_id,
            force_destroy=force_destroy,
        ),
        content_dir=ctx.get("content_dir"),
        comment=ctx.get("comment"),
    )
