"""
Stack holding one static website: log bucket, site bucket, origin access
identity, bucket policy and CloudFront distribution.
"""

from __future__ import annotations

from aws_cdk import Stack
from constructs import Construct

from site_infra.builders.static_site_builder import StaticWebsite


class StaticSiteStack(Stack):
    """
    One deployable static site per environment.

    Bucket names, region and force-delete behavior come from the ``site``
    context; pass ``env`` so the stack is pinned to that account and region.

    Attributes:
        site: The StaticWebsite construct, exposing the buckets and distribution
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.site = StaticWebsite(self, "Site")
