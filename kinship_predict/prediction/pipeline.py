from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from kinship_predict.app_hooks import AppHooks

from .config import PredictionConfig
from .errors import PredictionCancelled
from .model import PredictionCandidate
from .rules.base import PredictionRule
from .snapshot import TreeSnapshot, load_snapshot
from .store import TreeStore

logger = logging.getLogger(__name__)


@dataclass
class PredictionResult:
    tree_id: str
    candidates: List[PredictionCandidate] = field(default_factory=list)
    rule_counts: Dict[str, int] = field(default_factory=dict)  # rule_id -> candidates produced
    errors: Dict[str, str] = field(default_factory=dict)  # rule_id -> failure message

    @property
    def ok(self) -> bool:
        return not self.errors

    def by_rule(self, rule_id: str) -> List[PredictionCandidate]:
        return [c for c in self.candidates if c.rule_id == rule_id]


class PredictionPipeline:
    """
    Runs a set of prediction rules against one tree.

    The tree is loaded once and shared by all rules. A rule that fails is
    logged and recorded in the result; the others still contribute their
    candidates. Cancellation is never swallowed. Candidates from different
    rules are returned side by side, never merged.
    """

    def __init__(self, config: PredictionConfig, rules: Sequence[PredictionRule], store: TreeStore, app_hooks: Optional['AppHooks'] = None) -> None:
        self.config = config
        self.rules = list(rules)
        self.store = store
        self.app_hooks = app_hooks

        # Set app_hooks on all rules that support it
        for rule in self.rules:
            if hasattr(rule, 'app_hooks') and app_hooks is not None:
                rule.app_hooks = app_hooks

    async def run(self, tree_id: str, *, snapshot: Optional[TreeSnapshot] = None) -> PredictionResult:
        """
        Scan a tree.

        Args:
            tree_id: Tree to scan.
            snapshot: Already loaded snapshot to reuse instead of reading the store.

        Returns:
            PredictionResult with candidates in rule order.
        """
        result = PredictionResult(tree_id=tree_id)
        enabled_rules = [r for r in self.rules if self.config.rule_enabled(r.rule_id)]
        if not enabled_rules:
            logger.info(f"No prediction rules enabled for tree {tree_id}")
            return result

        logger.info(f"Starting prediction scan for tree {tree_id} with {len(enabled_rules)} rule(s)")
        self._report_step(info="Predicting relationships", target=len(enabled_rules) + 1, reset_counter=True, plus_step=0)

        if self._stop_requested("Prediction scan stopped by user"):
            raise PredictionCancelled()

        if snapshot is None:
            snapshot = await load_snapshot(self.store, tree_id)
        self._report_step(plus_step=1)

        if self.config.concurrent:
            tasks = [asyncio.ensure_future(self._run_rule(rule, snapshot)) for rule in enabled_rules]
            try:
                outcomes = await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                raise
        else:
            outcomes = []
            for rule in enabled_rules:
                if self._stop_requested("Prediction scan stopped by user"):
                    raise PredictionCancelled(rule.rule_id)
                outcomes.append(await self._run_rule(rule, snapshot))

        for rule, (candidates, error) in zip(enabled_rules, outcomes):
            if error is not None:
                result.errors[rule.rule_id] = error
                continue
            result.rule_counts[rule.rule_id] = len(candidates)
            result.candidates.extend(candidates)

        logger.info(
            f"Prediction scan complete for tree {tree_id}: {len(result.candidates)} candidate(s), "
            f"{len(result.errors)} failed rule(s)"
        )
        return result

    async def _run_rule(self, rule: PredictionRule, snapshot: TreeSnapshot) -> Tuple[List[PredictionCandidate], Optional[str]]:
        logger.info(f"Running rule {rule.rule_id} for tree {snapshot.tree_id}")
        try:
            candidates = await rule.detect(snapshot, self.store)
        except PredictionCancelled:
            raise
        except Exception as e:
            logger.exception(f"Error running prediction rule {rule.rule_id} for tree {snapshot.tree_id}")
            return [], f"{type(e).__name__}: {e}"
        logger.info(f"Rule {rule.rule_id} found {len(candidates)} candidate(s)")
        self._report_step(plus_step=1)
        return candidates, None

    def _report_step(self, info: str = "", target: Optional[int] = None, reset_counter: bool = False, plus_step: int = 0) -> None:
        """
        Report a step via app hooks if available. (Private method)

        Args:
            info (str): Information message.
            target (int): Target count for progress.
            reset_counter (bool): Whether to reset the counter.
            plus_step (int): Incremental step count.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "report_step", None)):
            self.app_hooks.report_step(info=info, target=target, reset_counter=reset_counter, plus_step=plus_step)
        elif info:
            logger.debug(info)

    def _stop_requested(self, logger_stop_message: str = "Stop requested by user") -> bool:
        """
        Check if stop has been requested via app hooks. (Private method)

        Returns:
            bool: True if stop requested, False otherwise.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "stop_requested", None)):
            if self.app_hooks.stop_requested():
                if logger_stop_message:
                    logger.debug(logger_stop_message)
                return True
        return False
