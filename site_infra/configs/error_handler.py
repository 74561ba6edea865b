"""
Centralized error handling for the static site CDK project.

This module provides the validation helpers used while loading configuration
and building constructs. Every helper raises a builtin exception with a
consistent message so that a bad cdk.json or JSON config fails synthesis
early and points at the offending field.
"""

from __future__ import annotations
import re
from pathlib import Path
from typing import Any, Dict, List, Union

# S3 naming rules: 3-63 chars, lowercase letters, digits, dots and hyphens,
# starting and ending with a letter or digit.
_BUCKET_NAME = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")

VIEWER_PROTOCOL_POLICIES = ["allow-all", "https-only", "redirect-to-https"]
COOKIE_FORWARDING = ["none", "whitelist", "all"]
PRICE_CLASSES = ["PriceClass_100", "PriceClass_200", "PriceClass_All"]
GEO_RESTRICTION_TYPES = ["none", "whitelist", "blacklist"]

class ErrorHandler:
    """
    Centralized error handling for the static site CDK project.

    Provides utility methods for common validation scenarios.
    """

    @staticmethod
    def validate_path_exists(
            path: Union[str, Path],
            path_type: str = "Path"
        ) -> None:
        """
        Validate that a path exists and is a directory.

        Args:
            path: Path to validate
            path_type: Type description for error messages

        Raises:
            FileNotFoundError: If path does not exist or is not a directory
        """
        if not Path(path).is_dir():
            raise FileNotFoundError(f"{path_type} not found: {path}")

    @staticmethod
    def validate_file_exists(
            file_path: Union[str, Path],
            file_type: str = "File"
        ) -> None:
        """
        Validate that a file exists.

        Args:
            file_path: File path to validate
            file_type: Type description for error messages

        Raises:
            FileNotFoundError: If file does not exist
        """
        if not Path(file_path).is_file():
            raise FileNotFoundError(f"{file_type} not found: {file_path}")

    @staticmethod
    def validate_required_fields(
            data: Dict[str, Any],
            required_fields: List[str],
            context: str = "Configuration"
        ) -> None:
        """
        Validate that all required fields are present in a dictionary.

        Args:
            data: Dictionary to validate
            required_fields: List of field names that must be present
            context: Context description for error messages

        Raises:
            ValueError: If any required fields are missing
        """
        missing_fields = [field for field in required_fields if field not in data]
        if missing_fields:
            raise ValueError(f"{context} missing required fields: {', '.join(missing_fields)}")

    @staticmethod
    def validate_enum_value(
            value: Any,
            valid_values: List[Any],
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is one of the allowed enum values.

        Args:
            value: Value to validate
            valid_values: List of allowed values
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not in the allowed list
        """
        if value not in valid_values:
            raise ValueError(f"{context} field '{field_name}' must be one of: {', '.join(map(str, valid_values))}")

    @staticmethod
    def validate_type(
            value: Any,
            expected_type: Union[type, tuple],
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is of the expected type.

        Args:
            value: Value to validate
            expected_type: Expected type class, or a tuple of them
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            TypeError: If value is not of the expected type
        """
        if not isinstance(value, expected_type):
            if isinstance(expected_type, tuple):
                expected = " or ".join(t.__name__ for t in expected_type)
            else:
                expected = expected_type.__name__
            raise TypeError(f"{context} field '{field_name}' must be of type {expected}, got {type(value).__name__}")

    @staticmethod
    def validate_non_negative_integer(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is an integer greater than or equal to zero.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not a non-negative integer
        """
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{context} field '{field_name}' must be a non-negative integer")

    @staticmethod
    def validate_boolean(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a boolean.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not a boolean
        """
        if not isinstance(value, bool):
            raise ValueError(f"{context} field '{field_name}' must be a boolean")

    @staticmethod
    def validate_string_not_empty(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a non-empty string.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not a non-empty string
        """
        if not isinstance(value, str) or value.strip() == "":
            raise ValueError(f"{context} field '{field_name}' must be a non-empty string")

    @staticmethod
    def validate_list_not_empty(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a non-empty list.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not a non-empty list
        """
        if not isinstance(value, list) or len(value) == 0:
            raise ValueError(f"{context} field '{field_name}' must be a non-empty list")

    @staticmethod
    def validate_context_keys(
            missing_keys: List[str],
            context: str = "Configuration"
        ) -> None:
        """
        Validate that required context keys are present.

        Args:
            missing_keys: List of missing key names
            context: Context description for error messages

        Raises:
            ValueError: If any required keys are missing
        """
        if missing_keys:
            raise ValueError(f"Missing required context keys in {context}: {', '.join(missing_keys)}")

    @staticmethod
    def validate_bucket_name(
            name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a name is a legal S3 bucket name.

        Args:
            name: Bucket name to validate
            context: Context description for error messages

        Raises:
            ValueError: If the name breaks S3 bucket naming rules
        """
        if not _BUCKET_NAME.match(name) or ".." in name:
            raise ValueError(
                f"{context} bucket name '{name}' must be 3-63 characters of lowercase "
                f"letters, digits, dots or hyphens, starting and ending with a letter or digit"
            )


def validate_distribution_config(conf: Dict[str, Any]) -> None:
    """
    Validate that a distribution configuration has all required fields.

    Args:
        conf: Distribution configuration dictionary

    Raises:
        ValueError: If required fields are missing or invalid
        TypeError: If a field has the wrong type
    """
    context = "Distribution configuration"
    ErrorHandler.validate_required_fields(
        conf,
        ["default_root_object", "default_cache_behavior", "logging"],
        context
    )
    ErrorHandler.validate_string_not_empty(conf["default_root_object"], "default_root_object", context)

    if "price_class" in conf:
        ErrorHandler.validate_enum_value(conf["price_class"], PRICE_CLASSES, "price_class", context)

    behavior = conf["default_cache_behavior"]
    ErrorHandler.validate_type(behavior, dict, "default_cache_behavior", context)
    ErrorHandler.validate_required_fields(
        behavior,
        ["allowed_methods", "cached_methods", "viewer_protocol_policy", "forward_query_string", "forward_cookies"],
        f"{context} default_cache_behavior"
    )
    ErrorHandler.validate_list_not_empty(behavior["allowed_methods"], "allowed_methods", context)
    ErrorHandler.validate_list_not_empty(behavior["cached_methods"], "cached_methods", context)
    ErrorHandler.validate_enum_value(
        behavior["viewer_protocol_policy"],
        VIEWER_PROTOCOL_POLICIES,
        "viewer_protocol_policy",
        context
    )
    ErrorHandler.validate_boolean(behavior["forward_query_string"], "forward_query_string", context)
    ErrorHandler.validate_enum_value(behavior["forward_cookies"], COOKIE_FORWARDING, "forward_cookies", context)
    for ttl in ("min_ttl", "default_ttl", "max_ttl"):
        if ttl in behavior:
            ErrorHandler.validate_non_negative_integer(behavior[ttl], ttl, context)

    logging_conf = conf["logging"]
    ErrorHandler.validate_type(logging_conf, dict, "logging", context)
    ErrorHandler.validate_required_fields(logging_conf, ["prefix", "include_cookies"], f"{context} logging")
    ErrorHandler.validate_type(logging_conf["prefix"], str, "prefix", context)
    ErrorHandler.validate_boolean(logging_conf["include_cookies"], "include_cookies", context)

    geo = conf.get("geo_restriction")
    if geo is not None:
        ErrorHandler.validate_type(geo, dict, "geo_restriction", context)
        ErrorHandler.validate_enum_value(
            geo.get("restriction_type"),
            GEO_RESTRICTION_TYPES,
            "restriction_type",
            context
        )
        if geo["restriction_type"] != "none":
            ErrorHandler.validate_list_not_empty(geo.get("locations"), "locations", context)
