"""Configuration file support for featurepick.

This module handles loading and parsing the .featurepick.yaml configuration file.

Each stage has its own section. Example:

    # How commits are searched for
    select:
      all_refs: true
      fixed_strings: false

    # How the pick session behaves
    pick:
      on_failed_pick: skip
      settle_seconds: 1.0

    # Where the ordered commit list is kept
    commit_list:
      path: commit_list.txt
      keep: true
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any
import logging
import yaml

log = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = ".featurepick.yaml"


class FailedPickPolicy(str, Enum):
    """What to do when a pick fails without leaving conflicts.

    SKIP: move on to the next commit.
    CONTINUE: run `cherry-pick --continue` first, then move on.
    """

    SKIP = "skip"
    CONTINUE = "continue"


@dataclass
class SelectConfig:
    """Configuration for commit selection.

    Attributes:
        all_refs: Search every ref (git log --all) rather than HEAD only.
        fixed_strings: Treat branch queries as literal strings.
        regexp_ignore_case: Match branch queries case-insensitively.
    """

    all_refs: bool = True
    fixed_strings: bool = False
    regexp_ignore_case: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "SelectConfig":
        return cls(
            all_refs=bool(data.get("all_refs", cls.all_refs)),
            fixed_strings=bool(data.get("fixed_strings", cls.fixed_strings)),
            regexp_ignore_case=bool(
                data.get("regexp_ignore_case", cls.regexp_ignore_case)
            ),
        )


@dataclass
class PickConfig:
    """Configuration for the pick session.

    Attributes:
        on_failed_pick: Policy for picks that fail without conflicts.
        settle_seconds: Delay before re-checking status after a conflict,
            giving git time to finish writing conflict state.
    """

    on_failed_pick: FailedPickPolicy = FailedPickPolicy.SKIP
    settle_seconds: float = 1.0

    @classmethod
    def from_dict(cls, data: dict) -> "PickConfig":
        """Create a PickConfig from a dictionary.

        Raises:
            ValueError: If on_failed_pick is unknown or settle_seconds is negative.
        """
        policy_str = data.get("on_failed_pick", cls.on_failed_pick.value)
        try:
            policy = FailedPickPolicy(policy_str)
        except ValueError:
            choices = ", ".join(p.value for p in FailedPickPolicy)
            raise ValueError(
                f"Invalid pick.on_failed_pick '{policy_str}' (expected one of: {choices})"
            )

        settle_seconds = float(data.get("settle_seconds", cls.settle_seconds))
        if settle_seconds < 0:
            raise ValueError("pick.settle_seconds must not be negative")

        return cls(on_failed_pick=policy, settle_seconds=settle_seconds)


@dataclass
class CommitListConfig:
    """Configuration for the commit list file.

    Attributes:
        path: File name, relative to the repository root.
        keep: Keep the file after a session that processed every commit.
    """

    path: str = "commit_list.txt"
    keep: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "CommitListConfig":
        return cls(
            path=str(data.get("path", cls.path)),
            keep=bool(data.get("keep", cls.keep)),
        )


@dataclass
class FeaturepickConfig:
    """Configuration settings for featurepick.

    All settings are optional and have sensible defaults.

    Attributes:
        select: Configuration for commit selection.
        pick: Configuration for the pick session.
        commit_list: Configuration for the commit list file.
        _raw: Raw dictionary data for accessing arbitrary sections.
    """

    select: SelectConfig = field(default_factory=SelectConfig)
    pick: PickConfig = field(default_factory=PickConfig)
    commit_list: CommitListConfig = field(default_factory=CommitListConfig)
    _raw: Dict[str, Any] = field(default_factory=dict)

    def get_section(self, name: str) -> Dict[str, Any]:
        """Get a configuration section by name, or an empty dict."""
        return self._raw.get(name, {})

    @classmethod
    def from_dict(cls, data: dict) -> "FeaturepickConfig":
        """Create a FeaturepickConfig from a dictionary.

        Unknown keys are stored in _raw for forward compatibility.

        Raises:
            ValueError: If a section is not a mapping or holds invalid values.
        """
        sections = {}
        for name in ("select", "pick", "commit_list"):
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise ValueError(f"Config section '{name}' must be a mapping")
            sections[name] = section

        return cls(
            select=SelectConfig.from_dict(sections["select"]),
            pick=PickConfig.from_dict(sections["pick"]),
            commit_list=CommitListConfig.from_dict(sections["commit_list"]),
            _raw=data,
        )


def load_config(config_path: Optional[str] = None) -> FeaturepickConfig:
    """Load configuration from a YAML file.

    If config_path is explicitly provided and the file doesn't exist, raises an error.
    If config_path is None and the default .featurepick.yaml doesn't exist, returns
    default config.

    Args:
        config_path: Path to the config file, or None to use the default path.

    Returns:
        FeaturepickConfig instance with loaded or default values.

    Raises:
        FileNotFoundError: If config_path is explicitly provided but file doesn't exist.
        yaml.YAMLError: If the config file contains invalid YAML.
        ValueError: If the config file contains invalid values.
    """
    explicit_path = config_path is not None
    path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_PATH)

    if not path.exists():
        if explicit_path:
            raise FileNotFoundError(f"Config file not found: {path}")
        # Default path doesn't exist - use default config
        return FeaturepickConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    # Handle empty file or file with only comments
    if data is None:
        return FeaturepickConfig()

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a YAML mapping (dictionary)")

    log.debug(f"Loaded config from {path}")
    return FeaturepickConfig.from_dict(data)
