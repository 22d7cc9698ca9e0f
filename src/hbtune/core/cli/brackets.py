"""
Module to display the bracket layout
====================================

Print the stages of every bracket and the total budget of a Hyperband execution, without
evaluating anything.

"""
import logging

import hbtune.core
from hbtune.algo.hyperband.brackets import BracketPlanner
from hbtune.algo.hyperband.budget import BudgetSpec

log = logging.getLogger(__name__)
SHORT_DESCRIPTION = "Prints the bracket layout of a budget range"
DESCRIPTION = """
This command prints, for every bracket and stage, the number of configurations evaluated
and their budget, both on the rescaled [1, r_max / r_min] scale and in the units of the
budget parameter. The total budget of one complete execution is printed last.
"""


def add_subparser(parser):
    """Add the subparser that needs to be used for this command"""
    brackets_parser = parser.add_parser(
        "brackets", help=SHORT_DESCRIPTION, description=DESCRIPTION
    )

    brackets_parser.add_argument(
        "--r-min",
        type=float,
        required=True,
        help="Smallest budget a configuration is evaluated with.",
    )

    brackets_parser.add_argument(
        "--r-max",
        type=float,
        required=True,
        help="Largest budget a configuration is evaluated with.",
    )

    brackets_parser.add_argument(
        "--eta",
        type=float,
        default=None,
        help=(
            "Reduction factor between stages. "
            "(default: hyperband.eta of the configuration)"
        ),
    )

    brackets_parser.add_argument(
        "--integer",
        action="store_true",
        help="Round budgets to the nearest integer.",
    )

    brackets_parser.add_argument(
        "--tablefmt",
        default="github",
        help="Format of the table, any format supported by tabulate. (default: github)",
    )

    brackets_parser.set_defaults(func=main)

    return brackets_parser


def main(args):
    """Build the bracket plan and print it"""
    eta = args["eta"]
    if eta is None:
        eta = hbtune.core.config.hyperband.eta

    budget_spec = BudgetSpec(
        args["r_min"], args["r_max"], eta, integer_budget=args["integer"]
    )
    planner = BracketPlanner(budget_spec)
    log.debug("Planning %s", planner)

    print(planner.tabulate_layout(tablefmt=args["tablefmt"]))
    print()
    print(f"Brackets: {budget_spec.n_brackets}")
    print(f"Total budget: {budget_spec.total_budget}")
