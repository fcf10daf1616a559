from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

# Per-rule tables merged with the packaged defaults rather than replaced
MERGED_KEYS = ("max_candidates", "rules_enabled")


def _read_yaml(yaml_path: Path) -> Dict[str, Any]:
    try:
        with open(yaml_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing {yaml_path}: {e}")


@dataclass
class PredictionConfig:
    """
    Configuration for relationship prediction.

    Loads all configuration values from config.yaml in the prediction directory.
    """
    # General settings
    enabled: bool = field(init=False)
    concurrent: bool = field(init=False)

    # Relationship constraints
    max_biological_parents: int = field(init=False)

    # Age gaps in years
    parent_age_gap_min: float = field(init=False)
    parent_age_gap_max: float = field(init=False)
    patronymic_reject_age_gap: float = field(init=False)
    age_family_ideal_gap_min: float = field(init=False)
    age_family_ideal_gap_max: float = field(init=False)

    # Patronymic score bounds
    patronymic_min_confidence: float = field(init=False)
    patronymic_max_confidence: float = field(init=False)

    # Output caps per rule
    max_candidates: Dict[str, int] = field(init=False)

    # Rule toggles
    rules_enabled: Dict[str, bool] = field(init=False)

    def __post_init__(self):
        """Load configuration from YAML file."""
        if not DEFAULT_CONFIG_PATH.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {DEFAULT_CONFIG_PATH}. "
                "Please ensure config.yaml exists in the prediction directory."
            )
        config_dict = _read_yaml(DEFAULT_CONFIG_PATH)
        for key in self.__dataclass_fields__.keys():
            if key in config_dict:
                object.__setattr__(self, key, config_dict[key])
            else:
                raise ValueError(f"Required configuration field '{key}' not found in config.yaml")

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> PredictionConfig:
        """
        Load configuration from a specific YAML file.

        Keys missing from the file fall back to the packaged config.yaml.

        Args:
            yaml_path: Path to YAML config file.

        Returns:
            PredictionConfig: Configuration instance loaded from YAML.
        """
        if not yaml_path or not Path(yaml_path).exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")
        return cls.from_dict(_read_yaml(Path(yaml_path)))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> PredictionConfig:
        """
        Create configuration from a dictionary.

        Args:
            config_dict (Dict[str, Any]): Dictionary with configuration values.
        Returns:
            PredictionConfig: Configuration instance.
        """
        instance = object.__new__(cls)
        defaults: Optional[Dict[str, Any]] = None

        for key in cls.__dataclass_fields__.keys():
            if key in config_dict and key not in MERGED_KEYS:
                object.__setattr__(instance, key, config_dict[key])
                continue
            if defaults is None:
                if not DEFAULT_CONFIG_PATH.exists():
                    raise ValueError(f"Required configuration field '{key}' not found and no default config.yaml")
                defaults = _read_yaml(DEFAULT_CONFIG_PATH)
            if key not in defaults:
                raise ValueError(f"Required configuration field '{key}' not found")
            value = defaults[key]
            if key in MERGED_KEYS:
                # Per-rule tables override the packaged ones key by key
                value = {**(value or {}), **(config_dict.get(key) or {})}
            object.__setattr__(instance, key, value)

        return instance

    def rule_enabled(self, rule_id: str) -> bool:
        # default: enabled unless explicitly false
        return bool(self.enabled) and self.rules_enabled.get(rule_id, True)

    def max_candidates_for(self, rule_id: str) -> Optional[int]:
        return (self.max_candidates or {}).get(rule_id)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, key) for key in self.__dataclass_fields__.keys()}
