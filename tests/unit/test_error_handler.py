"""Unit tests for configuration validation."""

from __future__ import annotations

import copy

import pytest

from site_infra.configs.error_handler import ErrorHandler, validate_distribution_config

VALID_DISTRIBUTION = {
    "default_root_object": "index.html",
    "price_class": "PriceClass_All",
    "default_cache_behavior": {
        "allowed_methods": ["GET", "HEAD"],
        "cached_methods": ["GET", "HEAD"],
        "viewer_protocol_policy": "redirect-to-https",
        "forward_query_string": False,
        "forward_cookies": "none",
        "min_ttl": 0,
        "default_ttl": 3600,
        "max_ttl": 86400,
    },
    "logging": {"prefix": "logs/", "include_cookies": False},
    "geo_restriction": {"restriction_type": "none", "locations": []},
}


class TestErrorHandler:
    """Test the individual validators."""

    def test_required_fields(self) -> None:
        """Test missing fields are listed."""
        with pytest.raises(ValueError, match="missing required fields: b, c"):
            ErrorHandler.validate_required_fields({"a": 1}, ["a", "b", "c"], "Thing")

    def test_enum_value(self) -> None:
        """Test values outside the allowed set fail."""
        ErrorHandler.validate_enum_value("b", ["a", "b"], "field")
        with pytest.raises(ValueError, match="must be one of: a, b"):
            ErrorHandler.validate_enum_value("c", ["a", "b"], "field")

    def test_type_with_tuple(self) -> None:
        """Test tuple types are reported by name."""
        with pytest.raises(TypeError, match="list or tuple, got str"):
            ErrorHandler.validate_type("x", (list, tuple), "field")

    def test_non_negative_integer(self) -> None:
        """Test booleans and negatives are rejected."""
        ErrorHandler.validate_non_negative_integer(0, "ttl")
        for bad in (-1, True, 1.5, "3"):
            with pytest.raises(ValueError):
                ErrorHandler.validate_non_negative_integer(bad, "ttl")

    def test_context_keys(self) -> None:
        """Test missing context keys are reported together."""
        ErrorHandler.validate_context_keys([], "cdk.json")
        with pytest.raises(ValueError, match="cdk.json: a, b"):
            ErrorHandler.validate_context_keys(["a", "b"], "cdk.json")

    @pytest.mark.parametrize("name", ["my-site-logs", "a.b.c", "abc", "x" * 63])
    def test_valid_bucket_names(self, name: str) -> None:
        """Test legal bucket names pass."""
        ErrorHandler.validate_bucket_name(name)

    @pytest.mark.parametrize("name", ["ab", "x" * 64, "Upper-case", "under_score", "-leading", "trailing-", "a..b"])
    def test_invalid_bucket_names(self, name: str) -> None:
        """Test illegal bucket names fail."""
        with pytest.raises(ValueError, match="bucket name"):
            ErrorHandler.validate_bucket_name(name)

    def test_file_exists(self, tmp_path) -> None:
        """Test missing files raise FileNotFoundError."""
        present = tmp_path / "present.json"
        present.write_text("{}")
        ErrorHandler.validate_file_exists(present)
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            ErrorHandler.validate_file_exists(tmp_path / "absent.json", "Config file")


class TestDistributionConfig:
    """Test distribution config validation."""

    def test_valid(self) -> None:
        """Test the reference configuration passes."""
        validate_distribution_config(copy.deepcopy(VALID_DISTRIBUTION))

    def test_missing_logging(self) -> None:
        """Test logging is required."""
        conf = copy.deepcopy(VALID_DISTRIBUTION)
        del conf["logging"]
        with pytest.raises(ValueError, match="logging"):
            validate_distribution_config(conf)

    def test_bad_viewer_protocol_policy(self) -> None:
        """Test unknown viewer protocol policies fail."""
        conf = copy.deepcopy(VALID_DISTRIBUTION)
        conf["default_cache_behavior"]["viewer_protocol_policy"] = "http-only"
        with pytest.raises(ValueError, match="viewer_protocol_policy"):
            validate_distribution_config(conf)

    def test_query_string_must_be_boolean(self) -> None:
        """Test forward_query_string is a boolean."""
        conf = copy.deepcopy(VALID_DISTRIBUTION)
        conf["default_cache_behavior"]["forward_query_string"] = "false"
        with pytest.raises(ValueError, match="forward_query_string"):
            validate_distribution_config(conf)

    def test_negative_ttl(self) -> None:
        """Test TTLs are non-negative integers."""
        conf = copy.deepcopy(VALID_DISTRIBUTION)
        conf["default_cache_behavior"]["max_ttl"] = -5
        with pytest.raises(ValueError, match="max_ttl"):
            validate_distribution_config(conf)

    def test_geo_restriction_requires_locations(self) -> None:
        """Test an active geo restriction lists its countries."""
        conf = copy.deepcopy(VALID_DISTRIBUTION)
        conf["geo_restriction"] = {"restriction_type": "whitelist", "locations": []}
        with pytest.raises(ValueError, match="locations"):
            validate_distribution_config(conf)

        conf["geo_restriction"]["locations"] = ["DE", "FR"]
        validate_distribution_config(conf)
