"""
hbtune runs the Hyperband budget-allocation scheduler.

Many candidate configurations are evaluated on a small budget, the best ``1/eta`` of them
are kept and evaluated again with ``eta`` times more budget, until the survivors reach the
maximum budget. Brackets trade off breadth (many configurations, small budgets) against
depth (few configurations, large budgets) under the same total budget.

Start with :class:`hbtune.algo.hyperband.Hyperband`.
"""
