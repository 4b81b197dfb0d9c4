"""
Tunable buildpack constants.

Defaults reproduce the classic layout. An app may override them with a
``sops-buildpack.yml`` file at the root of its source tree, and the
``SOPS_DOWNLOAD_URL`` config var overrides the download template.
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from sops_buildpack.config.env_dir import DOWNLOAD_URL_VARIABLE
from sops_buildpack.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "sops-buildpack.yml"

DEFAULT_DOWNLOAD_URL_TEMPLATE = (
    "https://github.com/mozilla/sops/releases/download/{version}/sops-{version}.linux"
)

NAME_SETTINGS = (
    "cache_prefix",
    "install_dir_name",
    "binary_name",
    "profile_script_name",
)
FORBIDDEN_NAME_CHARACTERS = "/\\\"'`$"


@dataclass(frozen=True)
class BuildpackSettings:
    """
    Externally configurable constants.

    Attributes:
        download_url_template: URL with a ``{version}`` placeholder
        cache_prefix: Cache entries are named ``<cache_prefix>_<version>``
        install_dir_name: Directory under the build dir holding the binary
        binary_name: File name of the installed binary
        profile_script_name: Script written under ``.profile.d``
        download_timeout: HTTP timeout in seconds
        max_retries: Download attempts before giving up
        lock_timeout: Seconds to wait for another build populating the cache
    """

    download_url_template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE
    cache_prefix: str = "sops"
    install_dir_name: str = ".sops-buildpack"
    binary_name: str = "sops"
    profile_script_name: str = "sops.sh"
    download_timeout: int = 60
    max_retries: int = 3
    lock_timeout: int = 300

    def download_url(self, version: str) -> str:
        return self.download_url_template.format(version=version)


def _validate_name(key: str, value: str, source: str):
    # Names become single path components and appear in a double-quoted shell line
    if not value or value == "." or ".." in value:
        raise ConfigError(f"Setting '{key}' in {source} is not a valid name: {value!r}")
    bad = sorted(set(value) & set(FORBIDDEN_NAME_CHARACTERS))
    if bad:
        raise ConfigError(
            f"Setting '{key}' in {source} must not contain {' '.join(bad)}: {value!r}"
        )


def _validate_overrides(data: Dict[str, Any], source: str) -> Dict[str, Any]:
    known = {f.name: f.type for f in fields(BuildpackSettings)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown settings in {source}: {', '.join(unknown)}")

    for key, value in data.items():
        expected = int if known[key] is int else str
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(
                f"Setting '{key}' in {source} must be {expected.__name__}, "
                f"got {type(value).__name__}"
            )
        if expected is int and value < 1:
            raise ConfigError(
                f"Setting '{key}' in {source} must be at least 1, got {value}"
            )
        if key in NAME_SETTINGS:
            _validate_name(key, value, source)

    template = data.get("download_url_template")
    if template is not None and "{version}" not in template:
        raise ConfigError(
            f"download_url_template in {source} must contain a {{version}} placeholder"
        )
    if template is not None:
        try:
            template.format(version="0.0.0")
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigError(
                f"download_url_template in {source} is not a valid template: {e}"
            ) from e

    return data


def load_settings_file(settings_file: Path) -> Dict[str, Any]:
    """
    Load setting overrides from a YAML file.

    Args:
        settings_file: Path to YAML file

    Returns:
        Override dictionary (empty if file doesn't exist or is empty)

    Raises:
        ConfigError: If YAML is invalid or contains unknown/mistyped keys
    """
    if not settings_file.is_file():
        logger.debug(f"Settings file not found (optional): {settings_file}")
        return {}

    logger.debug(f"Loading settings from {settings_file}")

    try:
        with open(settings_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {settings_file}: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError(f"{settings_file} must contain a mapping of settings")

    return _validate_overrides(data, settings_file.name)


def load_settings(
    build_dir: Optional[Path] = None,
    config_vars: Optional[Mapping[str, str]] = None,
) -> BuildpackSettings:
    """
    Compose settings from defaults, the app's settings file and config vars.

    Args:
        build_dir: Application source tree (may be None)
        config_vars: Values returned by read_config_vars

    Returns:
        Effective BuildpackSettings
    """
    settings = BuildpackSettings()

    if build_dir is not None:
        overrides = load_settings_file(Path(build_dir) / SETTINGS_FILE_NAME)
        if overrides:
            logger.info(f"Using settings from {SETTINGS_FILE_NAME}")
            settings = replace(settings, **overrides)

    url_override = (config_vars or {}).get(DOWNLOAD_URL_VARIABLE)
    if url_override:
        _validate_overrides(
            {"download_url_template": url_override}, DOWNLOAD_URL_VARIABLE
        )
        settings = replace(settings, download_url_template=url_override)

    return settings
