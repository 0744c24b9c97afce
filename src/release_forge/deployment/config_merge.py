"""Layered configuration resolution.

Three values documents feed every release:

1. base (``values.yaml``)
2. environment override (``env/<environment>.values.yaml``)
3. runtime overrides (image URL, commit SHA, service account, ``--set`` pairs)

They are deep-merged in that fixed order; the last layer wins on collision.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .constants import ReleaseConstants, ReleasePaths
from .errors import ConfigurationError, MissingEnvironmentConfigError

ConfigurationDocument = dict[str, Any]

_PLACEHOLDER_PATTERN = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<operator>:[-?])(?P<argument>[^}]*))?\}"
)


@dataclass(frozen=True)
class ResolvedConfiguration:
    """Merged configuration for one environment and one invocation."""

    environment: str
    values: ConfigurationDocument = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def as_dict(self) -> ConfigurationDocument:
        """Deep copy of the merged values, safe to hand to a template."""
        return deep_merge({}, self.values)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.values, default_flow_style=False, sort_keys=False)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> ConfigurationDocument:
    """Merge ``override`` onto ``base`` and return a new mapping.

    Nested mappings merge key by key; any other value (scalars, sequences)
    from ``override`` replaces the base value wholesale. Base key order is
    kept and override-only keys are appended. Neither input is mutated.
    """
    merged: ConfigurationDocument = {}
    for key, value in base.items():
        merged[key] = deep_merge({}, value) if isinstance(value, Mapping) else value

    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            merged[key] = deep_merge({}, value)
        else:
            merged[key] = value
    return merged


def merge(
    base: Mapping[str, Any],
    environment_override: Mapping[str, Any],
    runtime_overrides: Mapping[str, Any],
    *,
    environment: str = "",
) -> ResolvedConfiguration:
    """Resolve base < environment < runtime into one configuration."""
    layered = deep_merge(deep_merge(base, environment_override), runtime_overrides)
    return ResolvedConfiguration(environment=environment, values=layered)


def substitute_env_vars(text: str) -> str:
    """Expand ``${NAME}`` placeholders in a values document.

    ``${NAME:-fallback}`` uses the fallback while NAME is unset, and
    ``${NAME:?hint}`` fails with the hint. A bare ``${NAME}`` must be set.

    Raises:
        ConfigurationError: If a required variable is not set
    """

    def expand(match: re.Match[str]) -> str:
        name, operator, argument = match.group("name", "operator", "argument")
        value = os.environ.get(name)
        if value is not None:
            return value
        if operator == ":-":
            return argument
        hint = argument if operator == ":?" else "not set"
        raise ConfigurationError(f"Values document needs environment variable {name}: {hint}")

    return _PLACEHOLDER_PATTERN.sub(expand, text)


def load_values_document(path: Path) -> ConfigurationDocument:
    """Load one YAML values document with environment variable substitution.

    An empty file is an empty document.

    Raises:
        ConfigurationError: If the file is unreadable, not valid YAML, or its
            top level is not a mapping
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Unable to read values file {path}", details=str(e)) from e

    try:
        loaded = yaml.safe_load(substitute_env_vars(content))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing YAML in {path}", details=str(e)) from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Values file {path} must contain a mapping at the top level",
            details=f"Found {type(loaded).__name__} instead.",
        )
    return loaded


def parse_overrides(pairs: Iterable[str]) -> ConfigurationDocument:
    """Turn ``key=value`` pairs into a runtime override document.

    Dotted keys nest: ``resources.memory=1Gi`` becomes
    ``{"resources": {"memory": "1Gi"}}``. Values are kept verbatim as strings
    (``version=1.10`` stays ``"1.10"``) so they render exactly as typed.

    Raises:
        ConfigurationError: On a pair without ``=`` or with an empty key
    """
    overrides: ConfigurationDocument = {}
    for pair in pairs:
        key, sep, raw_value = pair.partition("=")
        key = key.strip()
        if not sep or not key or any(not part for part in key.split(".")):
            raise ConfigurationError(
                f"Invalid override '{pair}'",
                details="Overrides must look like key=value or nested.key=value.",
            )
        nested: Any = raw_value
        for part in reversed(key.split(".")):
            nested = {part: nested}
        overrides = deep_merge(overrides, nested)
    return overrides


class ConfigurationMerger:
    """Loads and merges the values documents of a release.

    Attributes:
        paths: Release resource path resolver
    """

    def __init__(self, paths: ReleasePaths) -> None:
        self.paths = paths
        self._constants = ReleaseConstants()

    def require_environment_document(self, environment: str) -> Path:
        """Pre-flight check that the environment values document exists.

        Runs before any render or replace; a missing document must never
        fall back to base-only configuration.

        Raises:
            ConfigurationError: If the environment name is malformed
            MissingEnvironmentConfigError: If the document does not exist
        """
        if not environment or not self._constants.ENVIRONMENT_PATTERN.match(environment):
            raise ConfigurationError(
                f"Invalid environment name: '{environment}'",
                details="Use lowercase letters, digits, '-' and '_' (e.g. test, production).",
                stage="preflight",
            )

        env_path = self.paths.environment_values(environment)
        if not env_path.is_file():
            raise MissingEnvironmentConfigError(
                f"Missing {env_path}",
                details=(
                    f"No values document exists for environment '{environment}'.\n"
                    f"Create {env_path} (it may be empty) before releasing."
                ),
                stage="preflight",
                resource=str(env_path),
            )
        return env_path

    def resolve(
        self,
        environment: str,
        runtime_overrides: Mapping[str, Any] | None = None,
    ) -> ResolvedConfiguration:
        """Load base and environment documents and layer runtime overrides on top.

        A missing base document is treated as empty; the environment document
        is mandatory.
        """
        env_path = self.require_environment_document(environment)

        base_path = self.paths.base_values
        if base_path.is_file():
            base = load_values_document(base_path)
        else:
            logger.warning(f"Base values file {base_path} not found, using empty base")
            base = {}

        environment_override = load_values_document(env_path)
        resolved = merge(
            base, environment_override, runtime_overrides or {}, environment=environment
        )
        logger.debug(
            f"Resolved configuration for '{environment}' with keys: {sorted(resolved.values)}"
        )
        return resolved
