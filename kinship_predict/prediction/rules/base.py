"""
Base classes for prediction rules.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Protocol, Type

from kinship_predict.prediction.errors import PredictionCancelled
from kinship_predict.prediction.model import PredictionCandidate
from kinship_predict.prediction.snapshot import TreeSnapshot, load_snapshot
from kinship_predict.prediction.store import TreeStore

logger = logging.getLogger(__name__)

# Rule Registry
_RULE_REGISTRY: Dict[str, Type['BaseRule']] = {}


def register_rule(cls: Type['BaseRule']) -> Type['BaseRule']:
    """
    Decorator to register a rule class in the global registry.

    Usage:
        @register_rule
        @dataclass
        class MyRule(BaseRule):
            rule_id: str = "my_rule"
            ...
    """
    rule_id = getattr(cls, 'rule_id', None)
    if rule_id:
        _RULE_REGISTRY[rule_id] = cls
        logger.debug(f"Registered prediction rule: {rule_id}")
    else:
        logger.warning(f"Rule {cls.__name__} missing 'rule_id' attribute, not registered")
    return cls


def get_rule_registry() -> Dict[str, Type['BaseRule']]:
    """Get the global rule registry."""
    return _RULE_REGISTRY.copy()


class PredictionRule(Protocol):
    """Anything with a rule_id that turns a tree snapshot into candidates."""
    rule_id: str
    description: str

    async def detect(self, snapshot: TreeSnapshot, store: TreeStore) -> List[PredictionCandidate]:
        ...


@dataclass
class BaseRule(ABC):
    """
    Base class for prediction rules.

    A rule is stateless between calls: every lookup or de-duplication set it
    needs is built inside detect() and dropped when it returns.

    Attributes:
        rule_id: Unique identifier for this rule
        description: What the rule detects
        app_hooks: Optional application hooks for progress and stop requests
    """
    rule_id: str = ""
    description: str = ""
    app_hooks: Any = None

    def __post_init__(self):
        if not self.rule_id:
            raise ValueError(f"{self.__class__.__name__} must define rule_id")

    @abstractmethod
    async def detect(self, snapshot: TreeSnapshot, store: TreeStore) -> List[PredictionCandidate]:
        """
        Detect missing relationships in a tree.

        Args:
            snapshot: Graph snapshot of the tree
            store: Store for per-pair existence and biological-parent checks

        Returns:
            Candidates produced by this rule
        """

    async def detect_for_tree(self, store: TreeStore, tree_id: str) -> List[PredictionCandidate]:
        """Load the tree and run this rule on its own."""
        snapshot = await load_snapshot(store, tree_id)
        return await self.detect(snapshot, store)

    def _candidate(self, predicted_type: str, source_person_id: str, target_person_id: str,
                   confidence: float, explanation: str) -> PredictionCandidate:
        return PredictionCandidate(
            rule_id=self.rule_id,
            predicted_type=predicted_type,
            source_person_id=source_person_id,
            target_person_id=target_person_id,
            confidence=float(confidence),
            explanation=explanation,
        )

    def _report_step(self, info: str = "", target: int = None, reset_counter: bool = False, plus_step: int = 0) -> None:
        """Report a step via app hooks if available.

        Args:
            info (str): Information message.
            target (int): Target count for progress.
            reset_counter (bool): Whether to reset the counter.
            plus_step (int): Incremental step count.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "report_step", None)):
            self.app_hooks.report_step(info=info, target=target, reset_counter=reset_counter, plus_step=plus_step)
        else:
            logger.debug(info)

    def _stop_requested(self, logger_stop_message: str = "Stop requested by user") -> bool:
        """Check if stop has been requested via app hooks.

        Returns:
            bool: True if stop requested, False otherwise.
        """
        if self.app_hooks and callable(getattr(self.app_hooks, "stop_requested", None)):
            if self.app_hooks.stop_requested():
                if logger_stop_message:
                    logger.debug(logger_stop_message)
                return True
        return False

    def _check_stop(self) -> None:
        """Raise PredictionCancelled if the caller asked to stop."""
        if self._stop_requested(logger_stop_message=f"Prediction rule {self.rule_id} stopped by user."):
            raise PredictionCancelled(self.rule_id)
