"""
hbtune core: configuration and execution support of the Hyperband scheduler.

The global configuration object ``hbtune.core.config`` holds the defaults used when the
scheduler is built without explicit arguments. Values can be overridden in
``hbtune_config.yaml`` files, through environment variables or by direct assignment.
"""
import logging
import os

from appdirs import AppDirs

from hbtune.core.io.config import Configuration

logger = logging.getLogger(__name__)

__descr__ = "Hyperband budget-allocation scheduler"
__version__ = "0.1.0"
__license__ = "BSD-3-Clause"
__author__ = "hbtune developers"
__author_short__ = "hbtune"

DIRS = AppDirs("hbtune", __author_short__)
del AppDirs

DEF_CONFIG_FILES_PATHS = [
    os.path.join(DIRS.site_config_dir, "hbtune_config.yaml"),
    os.path.join(DIRS.user_config_dir, "hbtune_config.yaml"),
]


def _optional_int(value):
    if value is None or (isinstance(value, str) and value.lower() in ("", "none")):
        return None
    return int(value)


def define_config():
    """Create and define the fields of the configuration object."""
    config = Configuration()
    define_hyperband_config(config)
    define_worker_config(config)
    return config


def define_hyperband_config(config):
    """Create and define the fields of the scheduler configuration."""
    hyperband_config = Configuration()

    hyperband_config.add_option(
        "eta",
        option_type=float,
        default=2,
        env_var="HBTUNE_ETA",
        help=(
            "Reduction factor of successive halving. Each stage keeps the best 1/eta "
            "configurations and multiplies their budget by eta."
        ),
    )

    hyperband_config.add_option(
        "seed",
        option_type=_optional_int,
        default=None,
        env_var="HBTUNE_SEED",
        help="Seed of the default uniform sampler.",
    )

    config.hyperband = hyperband_config


def define_worker_config(config):
    """Create and define the fields of the worker configuration."""
    worker_config = Configuration()

    worker_config.add_option(
        "executor",
        option_type=str,
        default="singleexecutor",
        env_var="HBTUNE_EXECUTOR",
        help=(
            "Executor used by the function evaluator to run the configurations of a stage. "
            "One of ``singleexecutor`` or ``joblib``."
        ),
    )

    worker_config.add_option(
        "n_workers",
        option_type=int,
        default=-1,
        env_var="HBTUNE_N_WORKERS",
        help="Number of workers of parallel executors. -1 uses all available cores.",
    )

    config.worker = worker_config


def build_config():
    """Define the config and fill it based on global configuration files."""
    config = define_config()
    for file_path in DEF_CONFIG_FILES_PATHS:
        if not os.path.exists(file_path):
            logger.debug("Config file not found: %s", file_path)
            continue

        config.load_yaml(file_path)

    return config


config = build_config()
