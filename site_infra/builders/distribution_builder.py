"""
CloudFront distribution builder for the static site CDK project.

The distribution is declared with the L1 CfnDistribution so that the origin
is always the site bucket's regional REST endpoint reached through the
origin access identity. The L2 S3Origin switches to the website endpoint
as soon as the bucket has a website configuration, which would bypass the
identity and the bucket policy.

Cache behavior, logging and geo restriction come from
configs/distribution/default.json, optionally overridden per environment by
configs/distribution/<env>.json.
"""

from __future__ import annotations
import logging
from aws_cdk import (
    aws_cloudfront as cloudfront,
    aws_s3 as s3,
    Stack,
)
from constructs import Construct
from site_infra.configs.config_manager import ConfigManager
from site_infra.configs.error_handler import validate_distribution_config

logger = logging.getLogger(__name__)

DEFAULTS_FILE = "default.json"

def load_distribution_config(scope: Construct) -> dict:
    """
    Load the distribution config for the current environment.

    Args:
        scope: Any construct inside the target stack

    Returns:
        Validated distribution configuration
    """
    config_mgr = ConfigManager(Stack.of(scope))
    env_file = f"{config_mgr.cfg.env.name}.json"

    if config_mgr.get_config_path("distribution", env_file).is_file():
        conf = config_mgr.load_config_with_defaults("distribution", env_file, DEFAULTS_FILE)
    else:
        conf = config_mgr.load_config("distribution", DEFAULTS_FILE)

    validate_distribution_config(conf)
    return conf

class SiteDistribution(Construct):
    """
    CloudFront distribution serving the site bucket.

    Attributes:
        distribution: Underlying CfnDistribution
        distribution_id: Distribution ID token
        domain_name: Distribution domain name token (dxxxx.cloudfront.net)
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            site_bucket: s3.IBucket,
            log_bucket: s3.IBucket,
            origin_access_identity: cloudfront.IOriginAccessIdentity,
            comment: str,
            origin_id: str,
        ) -> None:
        super().__init__(scope, construct_id)

        conf = load_distribution_config(self)
        behavior = conf["default_cache_behavior"]
        logging_conf = conf["logging"]
        geo = conf.get("geo_restriction") or {"restriction_type": "none"}

        origin = cloudfront.CfnDistribution.OriginProperty(
            id=origin_id,
            # Regional REST endpoint, never the website endpoint
            domain_name=site_bucket.bucket_regional_domain_name,
            s3_origin_config=cloudfront.CfnDistribution.S3OriginConfigProperty(
                origin_access_identity=(
                    f"origin-access-identity/cloudfront/{origin_access_identity.origin_access_identity_id}"
                ),
            ),
        )

        default_cache_behavior = cloudfront.CfnDistribution.DefaultCacheBehaviorProperty(
            target_origin_id=origin_id,
            viewer_protocol_policy=behavior["viewer_protocol_policy"],
            allowed_methods=behavior["allowed_methods"],
            cached_methods=behavior["cached_methods"],
            forwarded_values=cloudfront.CfnDistribution.ForwardedValuesProperty(
                query_string=behavior["forward_query_string"],
                cookies=cloudfront.CfnDistribution.CookiesProperty(
                    forward=behavior["forward_cookies"],
                ),
            ),
            min_ttl=behavior.get("min_ttl"),
            default_ttl=behavior.get("default_ttl"),
            max_ttl=behavior.get("max_ttl"),
        )

        self.distribution = cloudfront.CfnDistribution(
            self,
            "Distribution",
            distribution_config=cloudfront.CfnDistribution.DistributionConfigProperty(
                enabled=conf.get("enabled", True),
                comment=comment,
                default_root_object=conf["default_root_object"],
                http_version=conf.get("http_version"),
                ipv6_enabled=conf.get("ipv6_enabled"),
                price_class=conf.get("price_class"),
                origins=[origin],
                default_cache_behavior=default_cache_behavior,
                logging=cloudfront.CfnDistribution.LoggingProperty(
                    bucket=log_bucket.bucket_domain_name,
                    prefix=logging_conf["prefix"],
                    include_cookies=logging_conf["include_cookies"],
                ),
                restrictions=cloudfront.CfnDistribution.RestrictionsProperty(
                    geo_restriction=cloudfront.CfnDistribution.GeoRestrictionProperty(
                        restriction_type=geo["restriction_type"],
                        locations=geo.get("locations") or None,
                    ),
                ),
                viewer_certificate=cloudfront.CfnDistribution.ViewerCertificateProperty(
                    cloud_front_default_certificate=True,
                ),
            ),
        )

        self.distribution_id = self.distribution.ref
        self.domain_name = self.distribution.attr_domain_name

        logger.info(
            "Declared distribution for origin %s (viewer policy %s, logs under %s)",
            origin_id,
            behavior["viewer_protocol_policy"],
            logging_conf["prefix"],
        )
