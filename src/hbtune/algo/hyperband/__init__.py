"""
Hyperband
=========

Budget arithmetic, bracket planning, stage scheduling and the driver of Hyperband.

"""
from hbtune.algo.hyperband.brackets import Bracket, BracketPlanner, Stage
from hbtune.algo.hyperband.budget import (
    BudgetSpec,
    bracket_count,
    compute_s_max,
    total_budget,
)
from hbtune.algo.hyperband.hyperband import (
    Hyperband,
    format_objectives,
    get_budget_dimension,
)
from hbtune.algo.hyperband.scheduler import StageScheduler

__all__ = [
    "Bracket",
    "BracketPlanner",
    "BudgetSpec",
    "Hyperband",
    "Stage",
    "StageScheduler",
    "bracket_count",
    "compute_s_max",
    "format_objectives",
    "get_budget_dimension",
    "total_budget",
]
