"""
Settings for a v8kit run.

v8kit is driven by the environment cargo hands to a build script. Settings are
read once from an injected mapping (``os.environ`` in production, a plain dict
in tests) and never looked up ad hoc afterwards.

An optional YAML file can supply defaults for the same variables; real
environment values always win:

    # v8kit.yaml
    env:
      CLANG_BASE_PATH: /opt/llvm-17
      GN_ARGS: "v8_enable_i18n_support=false symbol_level=0"

Resolution order for the file: explicit path, ``V8KIT_CONFIG``, then
``<CARGO_MANIFEST_DIR>/v8kit.yaml``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "v8kit.yaml"

# Build-skip signals
TRYBUILD = "DENO_TRYBUILD"
RUSTDOCFLAGS = "RUSTDOCFLAGS"
CARGO = "CARGO"

# Cargo build script context
PROFILE = "PROFILE"
OUT_DIR = "OUT_DIR"
CARGO_MANIFEST_DIR = "CARGO_MANIFEST_DIR"

# Toolchain overrides
CLANG_BASE_PATH = "CLANG_BASE_PATH"
SCCACHE = "SCCACHE"
GN_ARGS = "GN_ARGS"
GN = "GN"
NINJA = "NINJA"
GN_NINJA_BINARIES_URL = "GN_NINJA_BINARIES_URL"
GN_NINJA_BINARIES_SHA256 = "GN_NINJA_BINARIES_SHA256"

V8KIT_CONFIG = "V8KIT_CONFIG"

# Variables that change what the build produces; cargo re-runs the build
# script when any of them changes.
TRIGGER_VARIABLES = (
    TRYBUILD,
    RUSTDOCFLAGS,
    CLANG_BASE_PATH,
    SCCACHE,
    GN_ARGS,
    GN,
    NINJA,
    GN_NINJA_BINARIES_URL,
    GN_NINJA_BINARIES_SHA256,
)

# Variables a config file may provide defaults for.
CONFIGURABLE_VARIABLES = frozenset(
    TRIGGER_VARIABLES + (CARGO, PROFILE, OUT_DIR, CARGO_MANIFEST_DIR)
)


@dataclass(frozen=True)
class Settings:
    """
    Resolved configuration for one run.

    Attributes:
        environ: Merged variables (config file defaults overlaid by the
            process environment). Also used as the base environment of every
            subprocess v8kit starts.
        config_file: The YAML file that contributed defaults, if any.
    """

    environ: Mapping[str, str] = field(default_factory=dict)
    config_file: Optional[Path] = None

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str], config_file: Optional[Path] = None
    ) -> "Settings":
        """
        Build settings from an environment mapping and optional config file.

        Args:
            environ: Process environment (or a test double)
            config_file: Explicit YAML file; must exist when given

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If the config file is invalid
        """
        environ = dict(environ)
        required = config_file is not None

        if config_file is None:
            config_file = _default_config_file(environ)

        defaults: Dict[str, str] = {}
        if config_file is not None:
            defaults = load_env_defaults(config_file, required=required)
            if not defaults and not required:
                config_file = None

        merged = dict(defaults)
        merged.update(environ)
        return cls(environ=merged, config_file=config_file)

    def get(self, name: str) -> Optional[str]:
        """Get a variable, or None when it is not set."""
        return self.environ.get(name)

    def is_set(self, name: str) -> bool:
        """True when a variable is present, even with an empty value."""
        return name in self.environ

    @property
    def profile(self) -> Optional[str]:
        return self.get(PROFILE)

    @property
    def out_dir(self) -> Optional[Path]:
        value = self.get(OUT_DIR)
        return Path(value) if value else None

    @property
    def manifest_dir(self) -> Optional[Path]:
        value = self.get(CARGO_MANIFEST_DIR)
        return Path(value) if value else None

    @property
    def clang_base_path(self) -> Optional[Path]:
        value = self.get(CLANG_BASE_PATH)
        return Path(value) if value else None

    @property
    def sccache(self) -> Optional[Path]:
        value = self.get(SCCACHE)
        return Path(value) if value else None

    @property
    def gn(self) -> Optional[str]:
        return self.get(GN)

    @property
    def ninja(self) -> Optional[str]:
        return self.get(NINJA)

    @property
    def gn_args(self) -> list:
        """Extra GN arguments, split on whitespace."""
        return (self.get(GN_ARGS) or "").split()

    @property
    def gn_ninja_binaries_url(self) -> Optional[str]:
        return self.get(GN_NINJA_BINARIES_URL) or None

    @property
    def gn_ninja_binaries_sha256(self) -> Optional[str]:
        """Expected SHA-256 of the GN/Ninja archive, if pinned."""
        return self.get(GN_NINJA_BINARIES_SHA256) or None


def _default_config_file(environ: Mapping[str, str]) -> Optional[Path]:
    if environ.get(V8KIT_CONFIG):
        return Path(environ[V8KIT_CONFIG])

    manifest_dir = environ.get(CARGO_MANIFEST_DIR)
    if manifest_dir:
        candidate = Path(manifest_dir) / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

    return None


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, or if YAML
            parsing fails
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Invalid configuration in {config_file}: expected a mapping"
        )
    return config


def load_env_defaults(config_file: Path, required: bool = False) -> Dict[str, str]:
    """
    Read the ``env:`` section of a config file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Mapping of variable name to string value

    Raises:
        ConfigurationError: If the section is malformed or names a variable
            v8kit does not recognize
    """
    config = load_yaml_config(config_file, required=required)

    unknown_sections = set(config) - {"env"}
    if unknown_sections:
        raise ConfigurationError(
            f"Unknown section(s) in {config_file}: {', '.join(sorted(unknown_sections))}"
        )

    env = config.get("env") or {}
    if not isinstance(env, dict):
        raise ConfigurationError(f"'env' in {config_file} must be a mapping")

    unknown = sorted(set(env) - CONFIGURABLE_VARIABLES)
    if unknown:
        raise ConfigurationError(
            f"Unrecognized variable(s) in {config_file}: {', '.join(unknown)}"
        )

    defaults = {}
    for name, value in env.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        defaults[name] = str(value)

    logger.debug(f"Loaded {len(defaults)} default(s) from {config_file}")
    return defaults
