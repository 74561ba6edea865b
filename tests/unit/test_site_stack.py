"""Unit tests for the synthesized static site stack."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from aws_cdk.assertions import Match, Template

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class TestBuckets:
    """Test the log and site buckets."""

    def test_two_named_buckets(self, template: Template) -> None:
        """Test the bucket naming convention."""
        template.resource_count_is("AWS::S3::Bucket", 2)
        template.has_resource_properties("AWS::S3::Bucket", {"BucketName": "unit-test-site-logs"})
        template.has_resource_properties("AWS::S3::Bucket", {"BucketName": "unit-test-site-site"})

    def test_log_bucket_acl_with_ownership(self, template: Template) -> None:
        """Test the log bucket enables ACLs before granting log delivery."""
        template.has_resource_properties("AWS::S3::Bucket", {
            "BucketName": "unit-test-site-logs",
            "AccessControl": "LogDeliveryWrite",
            "OwnershipControls": {
                "Rules": [{"ObjectOwnership": "BucketOwnerPreferred"}],
            },
        })

    def test_site_bucket_website(self, template: Template) -> None:
        """Test index and error documents."""
        template.has_resource_properties("AWS::S3::Bucket", {
            "BucketName": "unit-test-site-site",
            "WebsiteConfiguration": {
                "IndexDocument": "index.html",
                "ErrorDocument": "index.html",
            },
        })

    def test_site_bucket_public_access_block(self, template: Template) -> None:
        """Test all four flags are declared."""
        template.has_resource_properties("AWS::S3::Bucket", {
            "BucketName": "unit-test-site-site",
            "PublicAccessBlockConfiguration": {
                "BlockPublicAcls": False,
                "BlockPublicPolicy": False,
                "IgnorePublicAcls": False,
                "RestrictPublicBuckets": False,
            },
        })

    def test_force_destroy(self, template: Template) -> None:
        """Test dev buckets are deleted with their objects."""
        template.has_resource("AWS::S3::Bucket", {
            "Properties": {"BucketName": "unit-test-site-site"},
            "DeletionPolicy": "Delete",
        })
        template.resource_count_is("Custom::S3AutoDeleteObjects", 2)

    def test_retain_without_force_destroy(self, make_template) -> None:
        """Test main keeps buckets and does not empty them."""
        template = make_template(overrides={"site.env": "main"})

        template.has_resource("AWS::S3::Bucket", {
            "Properties": {"BucketName": "unit-test-site-logs"},
            "DeletionPolicy": "Retain",
        })
        template.has_resource("AWS::S3::Bucket", {
            "Properties": {"BucketName": "unit-test-site-site"},
            "DeletionPolicy": "Retain",
        })
        template.resource_count_is("Custom::S3AutoDeleteObjects", 0)


class TestAccessIdentity:
    """Test the origin access identity and bucket policy."""

    def test_identity(self, template: Template) -> None:
        """Test a single labelled identity."""
        template.resource_count_is("AWS::CloudFront::CloudFrontOriginAccessIdentity", 1)
        template.has_resource_properties("AWS::CloudFront::CloudFrontOriginAccessIdentity", {
            "CloudFrontOriginAccessIdentityConfig": {"Comment": "unit-test-site static site"},
        })

    def test_bucket_policy_read_for_identity(self, template: Template, logical_id) -> None:
        """Test object reads are granted to the identity on the site bucket objects."""
        site_id = logical_id(template, "AWS::S3::Bucket", {"BucketName": "unit-test-site-site"})
        oai_id = next(iter(template.find_resources("AWS::CloudFront::CloudFrontOriginAccessIdentity")))

        template.has_resource_properties("AWS::S3::BucketPolicy", {
            "Bucket": {"Ref": site_id},
            "PolicyDocument": {
                "Statement": Match.array_with([
                    Match.object_like({
                        "Effect": "Allow",
                        "Action": "s3:GetObject",
                        "Principal": {"AWS": Match.any_value()},
                        "Resource": {"Fn::Join": ["", [{"Fn::GetAtt": [site_id, "Arn"]}, "/*"]]},
                    }),
                ]),
            },
        })
        policies = template.find_resources("AWS::S3::BucketPolicy", {"Properties": {"Bucket": {"Ref": site_id}}})
        statements = next(iter(policies.values()))["Properties"]["PolicyDocument"]["Statement"]
        read = [s for s in statements if s.get("Action") == "s3:GetObject"]
        assert len(read) == 1
        assert json.dumps({"Ref": oai_id}) in json.dumps(read[0]["Principal"])


class TestDistribution:
    """Test the CloudFront distribution."""

    def test_origin_uses_regional_domain(self, template: Template, logical_id) -> None:
        """Test the origin is the bucket REST endpoint behind the identity."""
        site_id = logical_id(template, "AWS::S3::Bucket", {"BucketName": "unit-test-site-site"})

        template.has_resource_properties("AWS::CloudFront::Distribution", {
            "DistributionConfig": {
                "Origins": [{
                    "Id": "S3-unit-test-site-site",
                    "DomainName": {"Fn::GetAtt": [site_id, "RegionalDomainName"]},
                    "S3OriginConfig": {"OriginAccessIdentity": Match.any_value()},
                }],
            },
        })

    def test_default_cache_behavior(self, template: Template) -> None:
        """Test methods, HTTPS redirect and nothing forwarded."""
        template.has_resource_properties("AWS::CloudFront::Distribution", {
            "DistributionConfig": {
                "Enabled": True,
                "DefaultRootObject": "index.html",
                "DefaultCacheBehavior": {
                    "TargetOriginId": "S3-unit-test-site-site",
                    "AllowedMethods": ["GET", "HEAD"],
                    "CachedMethods": ["GET", "HEAD"],
                    "ViewerProtocolPolicy": "redirect-to-https",
                    "ForwardedValues": {
                        "QueryString": False,
                        "Cookies": {"Forward": "none"},
                    },
                },
            },
        })

    def test_logging_to_log_bucket(self, template: Template, logical_id) -> None:
        """Test access logs land under logs/ in the log bucket without cookies."""
        log_id = logical_id(template, "AWS::S3::Bucket", {"BucketName": "unit-test-site-logs"})

        template.has_resource_properties("AWS::CloudFront::Distribution", {
            "DistributionConfig": {
                "Logging": {
                    "Bucket": {"Fn::GetAtt": [log_id, "DomainName"]},
                    "Prefix": "logs/",
                    "IncludeCookies": False,
                },
            },
        })

    def test_no_geo_restriction_default_certificate(self, template: Template) -> None:
        """Test open geography and the shared CloudFront certificate."""
        template.has_resource_properties("AWS::CloudFront::Distribution", {
            "DistributionConfig": {
                "Restrictions": {"GeoRestriction": {"RestrictionType": "none"}},
                "ViewerCertificate": {"CloudFrontDefaultCertificate": True},
            },
        })

    def test_outputs(self, template: Template) -> None:
        """Test the stack exports names and the distribution domain."""
        outputs = template.find_outputs("*")
        names = " ".join(outputs)

        for expected in ("SiteBucketName", "LogBucketName", "DistributionId", "DistributionDomainName", "WebsiteURL"):
            assert expected in names


class TestContentDeployment:
    """Test the optional upload of site content."""

    def test_no_deployment_by_default(self, template: Template) -> None:
        """Test nothing is uploaded without content_dir."""
        template.resource_count_is("Custom::CDKBucketDeployment", 0)

    def test_deployment_from_content_dir(self, make_template) -> None:
        """Test content_dir adds a bucket deployment."""
        template = make_template(site={"content_dir": str(PROJECT_ROOT / "site_src")})

        template.resource_count_is("Custom::CDKBucketDeployment", 1)

    def test_missing_content_dir(self, make_template, tmp_path) -> None:
        """Test a missing content directory fails synthesis."""
        with pytest.raises(FileNotFoundError, match="Site content directory"):
            make_template(site={"content_dir": str(tmp_path / "missing")})
