from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from kinship_predict.app_hooks import AppHooks

from .config import DEFAULT_CONFIG_PATH, PredictionConfig
from .defaults import get_default_rules
from .pipeline import PredictionPipeline, PredictionResult
from .store import TreeStore


class Prediction:
    def __init__(
        self,
        store: TreeStore,
        config_dict=None,
        config_yaml: Optional[Path] = None,
        app_hooks: Optional['AppHooks'] = None
    ) -> None:
        """
        Initialize prediction with optional configuration.

        Args:
            store: Data-access layer the rules read from
            config_dict: Dictionary to override config values
            config_yaml: Path to YAML config file. If None, uses default config.yaml
            app_hooks: Optional application hooks for progress reporting and stop requests
        """
        config_yaml = Path(config_yaml) if config_yaml else DEFAULT_CONFIG_PATH
        if not config_yaml.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_yaml}")
        self.config = PredictionConfig.from_yaml(config_yaml)

        # Apply dictionary overrides if provided
        if config_dict:
            self.config = PredictionConfig.from_dict({**self.config.to_dict(), **config_dict})

        self.store = store
        self.rules = get_default_rules(self.config, app_hooks=app_hooks)
        self.pipeline = PredictionPipeline(
            config=self.config,
            rules=self.rules,
            store=store,
            app_hooks=app_hooks
        )
        self.last_result: Optional[PredictionResult] = None

    async def scan(self, tree_id: str) -> PredictionResult:
        """
        Scan a tree with every enabled rule.

        Args:
            tree_id: Tree to scan.

        Returns:
            PredictionResult: Candidates from all rules, unmerged.
        """
        result = await self.pipeline.run(tree_id)
        self.last_result = result
        return result

    def scan_sync(self, tree_id: str) -> PredictionResult:
        """Blocking wrapper around scan() for callers without an event loop."""
        return asyncio.run(self.scan(tree_id))
