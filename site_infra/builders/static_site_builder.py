"""
Static website builder for the static site CDK project.

This module composes the whole hosting setup: an access log bucket, the site
bucket with its website configuration and public access block, an origin
access identity, the bucket policy restricting reads to that identity, and
the CloudFront distribution in front of it. Site content can optionally be
uploaded from a local directory.
"""

from __future__ import annotations
import logging
from pathlib import Path
from aws_cdk import (
    aws_cloudfront as cloudfront,
    aws_s3 as s3,
    aws_s3_deployment as s3_deployment,
    CfnOutput,
)
from constructs import Construct
from site_infra.builders.distribution_builder import SiteDistribution
from site_infra.builders.log_bucket_builder import LogBucket, removal_settings
from site_infra.builders.policy_builder import apply_policy_to_bucket
from site_infra.configs.error_handler import ErrorHandler
from site_infra.configs.site_cfg import get_cfg

logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"
ERROR_DOCUMENT = "index.html"
SITE_POLICY_FILE = "site_bucket.json"

class StaticWebsite(Construct):
    """
    Static website served by CloudFront from a private-read S3 bucket.

    Attributes:
        log_bucket: Bucket receiving distribution access logs
        bucket: Bucket holding the site content
        origin_access_identity: Identity CloudFront presents to the site bucket
        distribution: The SiteDistribution construct
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
        ) -> None:
        """
        Initialize the static website builder.

        Names, removal behavior and the optional content directory come from
        the "site" context in cdk.json.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
        """
        super().__init__(scope, construct_id)

        cfg = get_cfg(self)

        self.log_bucket = LogBucket(
            self,
            "Logs",
            bucket_name=cfg.log_bucket_name,
            force_destroy=cfg.env.force_destroy,
        ).bucket

        # Create S3 bucket for static website hosting
        self.bucket = s3.Bucket(
            self,
            "SiteBucket",
            bucket_name=cfg.site_bucket_name,
            website_index_document=INDEX_DOCUMENT,
            website_error_document=ERROR_DOCUMENT,
            # All four flags are set explicitly, reads are gated by the bucket policy
            block_public_access=s3.BlockPublicAccess(
                block_public_acls=False,
                block_public_policy=False,
                ignore_public_acls=False,
                restrict_public_buckets=False,
            ),
            **removal_settings(cfg.env.force_destroy),
        )

        self.origin_access_identity = cloudfront.OriginAccessIdentity(
            self,
            "OriginAccessIdentity",
            comment=cfg.resolved_comment,
        )

        apply_policy_to_bucket(
            self.bucket,
            SITE_POLICY_FILE,
            extra_vars={
                "SiteBucketArn": self.bucket.bucket_arn,
                "OaiId": self.origin_access_identity.origin_access_identity_id,
            },
        )

        self.distribution = SiteDistribution(
            self,
            "Cdn",
            site_bucket=self.bucket,
            log_bucket=self.log_bucket,
            origin_access_identity=self.origin_access_identity,
            comment=cfg.resolved_comment,
            origin_id=f"S3-{cfg.site_bucket_name}",
        )

        if cfg.content_dir:
            self._deploy_content(cfg.content_dir)

        CfnOutput(self, "SiteBucketName", value=self.bucket.bucket_name)
        CfnOutput(self, "LogBucketName", value=self.log_bucket.bucket_name)
        CfnOutput(self, "DistributionId", value=self.distribution.distribution_id)
        CfnOutput(self, "DistributionDomainName", value=self.distribution.domain_name)
        CfnOutput(self, "WebsiteURL", value=f"https://{self.distribution.domain_name}")

        logger.info(
            "Declared static website %s in %s (env %s)",
            cfg.site_bucket_name,
            cfg.env.region,
            cfg.env.name,
        )

    def _deploy_content(self, content_dir: str) -> None:
        """
        Upload a local directory to the site bucket on every deploy.

        Args:
            content_dir: Directory path, relative paths resolve from the working directory

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        asset_dir = Path(content_dir).resolve()
        ErrorHandler.validate_path_exists(asset_dir, "Site content directory")

        s3_deployment.BucketDeployment(
            self,
            "DeployWebsite",
            sources=[s3_deployment.Source.asset(str(asset_dir))],
            destination_bucket=self.bucket,
        )
        logger.info("Site content will be uploaded from %s", asset_dir)
