from __future__ import annotations
import json, logging, re
from pathlib import Path
from typing import Any, Mapping, Optional
from aws_cdk import Stack
from site_infra.configs.error_handler import ErrorHandler
from site_infra.configs.site_cfg import get_cfg

_VAR = re.compile(r"\$\{([A-Za-z0-9_]+)\}")

logger = logging.getLogger(__name__)

class ConfigManager:
    """
    Centralized configuration management for the static site CDK project.

    Handles:
    - Path resolution for different config types (policies, distribution)
    - JSON file loading with placeholder expansion
    - Default file merging
    """

    # Root config directory, next to this module
    CONFIG_ROOT = Path(__file__).resolve().parent

    # Config type mappings to subdirectories
    CONFIG_PATHS = {
        "policies": "iam/policies",
        "distribution": "distribution",
    }

    def __init__(self, stack: Stack, extra_vars: Optional[Mapping[str, str]] = None):
        self.stack = stack
        self.cfg = get_cfg(stack)
        self.vars = self.cfg.vars(stack, dict(extra_vars) if extra_vars else None)

    def get_config_path(self, config_type: str, filename: str = None) -> Path:
        """
        Get the full path to a config file.

        Args:
            config_type: Type of config (policies, distribution)
            filename: Optional filename, if None returns the directory path

        Returns:
            Full path to the config file or directory
        """
        ErrorHandler.validate_enum_value(
            config_type,
            list(self.CONFIG_PATHS),
            "config_type",
            "ConfigManager"
        )

        base_path = self.CONFIG_ROOT / self.CONFIG_PATHS[config_type]

        if filename:
            return base_path / filename
        return base_path

    def expand_placeholders(self, obj: Any, vars: Mapping[str, str] = None) -> Any:
        """
        Recursively expand ${VAR} placeholders in strings, lists, and dicts.

        Unknown placeholders are left untouched.

        Args:
            obj: Object to expand placeholders in
            vars: Variables to substitute (uses stack vars if None)

        Returns:
            Object with placeholders expanded
        """
        if vars is None:
            vars = self.vars

        if isinstance(obj, str):
            return _VAR.sub(lambda m: str(vars.get(m.group(1), m.group(0))), obj)
        if isinstance(obj, list):
            return [self.expand_placeholders(x, vars) for x in obj]
        if isinstance(obj, dict):
            return {k: self.expand_placeholders(v, vars) for k, v in obj.items()}
        return obj

    def load_json(self, filepath: Path | str, expand_vars: bool = True) -> dict:
        """
        Load and parse a JSON file, optionally expanding placeholders.

        Args:
            filepath: Path to the JSON file
            expand_vars: Whether to expand placeholders in the loaded JSON

        Returns:
            Parsed JSON as dict
        """
        ErrorHandler.validate_file_exists(filepath, "Config file")

        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded config %s", filepath)

        if expand_vars:
            data = self.expand_placeholders(data)

        return data

    def load_config(self, config_type: str, filename: str, expand_vars: bool = True) -> dict:
        """
        Load a config file by type and filename.

        Args:
            config_type: Type of config (policies, distribution)
            filename: Name of the config file
            expand_vars: Whether to expand placeholders

        Returns:
            Parsed JSON config
        """
        filepath = self.get_config_path(config_type, filename)
        return self.load_json(filepath, expand_vars)

    def load_config_with_defaults(self, config_type: str, filename: str, defaults_file: str = None) -> dict:
        """
        Load a config file and merge with defaults if provided.

        Top-level keys of the config replace those of the defaults.

        Args:
            config_type: Type of config
            filename: Name of the config file
            defaults_file: Optional defaults file to merge

        Returns:
            Merged config dict
        """
        config = self.load_config(config_type, filename)

        if defaults_file and defaults_file != filename:
            defaults = self.load_config(config_type, defaults_file)
            config = {**defaults, **config}  # Config overrides defaults

        return config
