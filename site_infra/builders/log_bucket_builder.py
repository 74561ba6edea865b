"""
Access log bucket builder for the static site CDK project.

CloudFront standard logging writes through the legacy S3 ACL mechanism, so
the log bucket needs ACLs enabled: ownership controls that still honor ACLs
(BucketOwnerPreferred) and the log-delivery-write canned ACL on top.
"""

from __future__ import annotations
import logging
from aws_cdk import (
    aws_s3 as s3,
    RemovalPolicy,
)
from constructs import Construct
from site_infra.configs.error_handler import ErrorHandler

logger = logging.getLogger(__name__)

# Ownership modes under which S3 still applies bucket ACLs
ACL_COMPATIBLE_OWNERSHIP = (
    s3.ObjectOwnership.BUCKET_OWNER_PREFERRED,
    s3.ObjectOwnership.OBJECT_WRITER,
)

def removal_settings(force_destroy: bool) -> dict:
    """
    Map the force-delete flag to bucket removal settings.

    Args:
        force_destroy: Whether the bucket and its objects go away with the stack

    Returns:
        Keyword arguments for s3.Bucket
    """
    if force_destroy:
        return {"removal_policy": RemovalPolicy.DESTROY, "auto_delete_objects": True}
    return {"removal_policy": RemovalPolicy.RETAIN, "auto_delete_objects": False}

class LogBucket(Construct):
    """
    Bucket receiving the distribution's access logs.
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            bucket_name: str,
            force_destroy: bool,
            object_ownership: s3.ObjectOwnership = s3.ObjectOwnership.BUCKET_OWNER_PREFERRED,
        ) -> None:
        """
        Initialize the log bucket.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            bucket_name: Physical bucket name
            force_destroy: Whether the bucket is emptied and deleted with the stack
            object_ownership: Ownership mode, must keep ACLs enabled

        Raises:
            ValueError: If the ownership mode disables ACLs
        """
        super().__init__(scope, construct_id)

        ErrorHandler.validate_bucket_name(bucket_name, "Log bucket")
        # The ACL below is only honored once ownership controls allow ACLs
        if object_ownership not in ACL_COMPATIBLE_OWNERSHIP:
            raise ValueError(
                f"Log bucket object ownership must keep ACLs enabled, got {object_ownership}"
            )

        self.object_ownership = object_ownership
        self.access_control = s3.BucketAccessControl.LOG_DELIVERY_WRITE

        self.bucket = s3.Bucket(
            self,
            "Bucket",
            bucket_name=bucket_name,
            object_ownership=self.object_ownership,
            access_control=self.access_control,
            **removal_settings(force_destroy),
        )

        logger.info(
            "Declared log bucket %s (force_destroy=%s)", bucket_name, force_destroy
        )
