"""Tree state layer.

This package is the single source of truth for which hierarchy nodes are
expanded, what children they have loaded, and which path is selected.
"""

from pyfitment.state.keys import (
    CategoryKey,
    EngineKey,
    MakeKey,
    ModelKey,
    NodeKey,
    NodeLevel,
    YearKey,
)
from pyfitment.state.tree import NodeState, TreeState

__all__ = [
    "CategoryKey",
    "EngineKey",
    "MakeKey",
    "ModelKey",
    "NodeKey",
    "NodeLevel",
    "NodeState",
    "TreeState",
    "YearKey",
]
