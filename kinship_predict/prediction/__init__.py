"""Prediction module: Rule-based detection of relationships missing from a family tree.

Scans a tree's people, parent-child links and unions and proposes the links
that are probably missing, each with a confidence (0-100) and an explanation:
    - A spouse not linked to their partner's children
    - Co-parents without a union
    - Siblings missing the second parent of a union
    - Arabic patronymic name matches
    - Generation-sized age gaps inside a family group

Core classes:
    - Prediction: High-level interface for scanning a tree
    - PredictionPipeline: Loads the tree once and runs the rules
    - PredictionConfig: Configuration for rule parameters and toggles
    - PredictionResult: Candidates, per-rule counts and isolated rule failures
    - TreeSnapshot: Immutable graph snapshot shared by the rules
    - TreeStore: Read contract for the data-access layer

Candidates from different rules are never merged by the engine;
aggregate.merge_candidates() is available to callers that want that.

Example:
    >>> from kinship_predict.prediction import Prediction, InMemoryTreeStore
    >>> prediction = Prediction(store=InMemoryTreeStore(people, links, unions))
    >>> result = prediction.scan_sync("tree-1")
    >>> for candidate in result.candidates:
    ...     print(f"{candidate.confidence}: {candidate.explanation}")
"""

from .model import PredictionCandidate
from .model import PARENT_CHILD
from .model import UNION
from .errors import PredictionError
from .errors import DataAccessError
from .errors import PredictionCancelled
from .store import TreeStore
from .store import InMemoryTreeStore
from .snapshot import TreeSnapshot
from .snapshot import load_snapshot
from .config import PredictionConfig
from .rules import PredictionRule
from .rules import BaseRule
from .rules import SpouseChildGapRule
from .rules import MissingUnionRule
from .rules import SiblingParentGapRule
from .rules import PatronymicNameRule
from .rules import AgeFamilyRule
from .defaults import get_default_rules
from .pipeline import PredictionPipeline
from .pipeline import PredictionResult
from .aggregate import confidence_level
from .aggregate import merge_candidates
from .prediction import Prediction

__all__ = [
    'PredictionCandidate',
    'PARENT_CHILD',
    'UNION',
    'PredictionError',
    'DataAccessError',
    'PredictionCancelled',
    'TreeStore',
    'InMemoryTreeStore',
    'TreeSnapshot',
    'load_snapshot',
    'PredictionConfig',
    'PredictionRule',
    'BaseRule',
    'SpouseChildGapRule',
    'MissingUnionRule',
    'SiblingParentGapRule',
    'PatronymicNameRule',
    'AgeFamilyRule',
    'get_default_rules',
    'PredictionPipeline',
    'PredictionResult',
    'confidence_level',
    'merge_candidates',
    'Prediction',
]
