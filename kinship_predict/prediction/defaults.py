"""
Default prediction rules configuration.
"""
from __future__ import annotations

from typing import List, Optional

from kinship_predict.app_hooks import AppHooks

from .config import PredictionConfig
from .rules import BaseRule, get_rule_registry


# Rule parameter mapping: maps config fields to rule constructor parameters
RULE_PARAM_MAP = {
    'spouse_child_gap': {
        'max_biological_parents': 'max_biological_parents',
    },
    'missing_union': {},
    'sibling_parent_gap': {
        'max_biological_parents': 'max_biological_parents',
    },
    'patronymic_name': {
        'min_age_gap': 'parent_age_gap_min',
        'max_age_gap': 'parent_age_gap_max',
        'reject_age_gap': 'patronymic_reject_age_gap',
        'min_confidence': 'patronymic_min_confidence',
        'max_confidence': 'patronymic_max_confidence',
        'max_candidates': lambda cfg: cfg.max_candidates_for('patronymic_name'),
    },
    'age_family': {
        'min_age_gap': 'parent_age_gap_min',
        'max_age_gap': 'parent_age_gap_max',
        'ideal_age_gap_min': 'age_family_ideal_gap_min',
        'ideal_age_gap_max': 'age_family_ideal_gap_max',
        'max_candidates': lambda cfg: cfg.max_candidates_for('age_family'),
    },
}


def get_default_rules(config: PredictionConfig, app_hooks: Optional[AppHooks] = None) -> List[BaseRule]:
    """
    Create default prediction rules based on config using the rule registry.

    Automatically discovers all registered rules and instantiates them with
    appropriate config values.

    Args:
        config: PredictionConfig instance with rule parameters.
        app_hooks: Optional hooks handed to every rule.

    Returns:
        List[BaseRule]: List of configured rules from the registry.
    """
    registry = get_rule_registry()
    rules = []

    for rule_id, rule_class in registry.items():
        if not config.rule_enabled(rule_id):
            continue

        param_map = RULE_PARAM_MAP.get(rule_id, {})

        kwargs = {}
        for param_name, config_key in param_map.items():
            if callable(config_key):
                kwargs[param_name] = config_key(config)
            else:
                kwargs[param_name] = getattr(config, config_key)

        rules.append(rule_class(app_hooks=app_hooks, **kwargs))

    return rules
