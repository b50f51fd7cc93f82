from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import ValidationError

from sqlstyle.errors import ConfigError
from sqlstyle.models.config import LinterConfig, RuleSettings
from sqlstyle.rules import RULES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME: Final[str] = ".sqlstyle.yaml"
CONFIG_ENV_VAR: Final[str] = "SQLSTYLE_CONFIG"


def _unknown_rule(rule_id: object) -> ConfigError:
    known = ", ".join(RULES)
    return ConfigError(f"unknown rule id '{rule_id}' (known rules: {known})")


def _rule_settings(rule_id: str, raw: Any) -> RuleSettings:
    if rule_id not in RULES:
        raise _unknown_rule(rule_id)
    model = RULES[rule_id].settings_model
    if isinstance(raw, bool):
        raw = {"enabled": raw}
    elif raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"settings for rule '{rule_id}' must be a mapping or a boolean")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid settings for rule '{rule_id}': {e}") from e


def build_config(raw: dict[str, Any] | None = None, disable: Iterable[str] = ()) -> LinterConfig:
    """Validate a raw configuration mapping into a LinterConfig.

    Every registered rule gets an entry, defaulted when the mapping omits it.

    Args:
        raw: Parsed configuration mapping (``dialect``, ``indent_width``, ``rules``).
        disable: Rule ids to switch off regardless of the mapping.

    Returns:
        LinterConfig: Immutable configuration for the run.

    Raises:
        ConfigError: On unknown keys, unknown rule ids or illegal values.
    """
    raw = dict(raw or {})
    raw_rules = raw.pop("rules", None) or {}
    if not isinstance(raw_rules, dict):
        raise ConfigError("'rules' must be a mapping of rule id to settings")

    rules: dict[str, RuleSettings] = {
        rule_id: _rule_settings(rule_id, raw_rules.get(rule_id)) for rule_id in RULES
    }
    for rule_id in raw_rules:
        if rule_id not in RULES:
            raise _unknown_rule(rule_id)
    for rule_id in disable:
        if rule_id not in RULES:
            raise _unknown_rule(rule_id)
        rules[rule_id] = rules[rule_id].model_copy(update={"enabled": False})

    try:
        return LinterConfig(rules=rules, **raw)
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"invalid configuration: {e}") from e


class ConfigLoader:
    """Read a YAML configuration file into a LinterConfig."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path: Path | None = Path(path) if path is not None else None

    @staticmethod
    def discover(cwd: Path | None = None) -> Path | None:
        """Configuration path from ``SQLSTYLE_CONFIG`` or ``.sqlstyle.yaml`` in ``cwd``."""

        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)
        candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
        return candidate if candidate.is_file() else None

    def read(self) -> dict[str, Any]:
        if self.path is None:
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read configuration file {self.path}: {e}") from e
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"malformed YAML in {self.path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"configuration file {self.path} must contain a mapping")
        return data

    def load(self, disable: Iterable[str] = ()) -> LinterConfig:
        config = build_config(self.read(), disable=disable)
        logger.debug("Loaded configuration from %s", self.path or "defaults")
        return config
