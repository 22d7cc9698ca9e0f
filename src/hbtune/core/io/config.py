# pylint: disable=redefined-builtin
"""
Configuration object
====================

Layered configuration for hbtune.

Every option has a type and optionally a default value, an environment variable and a help
message. The value of an option is resolved, by order of precedence, from a direct assignment,
the environment variable, the YAML configuration files and finally the default.

"""
import logging
import os
import pprint

import yaml

logger = logging.getLogger(__name__)


NOT_SET = object()


class ConfigurationError(Exception):
    """Error raised when a configuration value is requested but not set."""


def _curate(key):
    return key.replace("-", "_")


class Configuration:
    """Configuration object

    Examples
    --------
    >>> config = Configuration()
    >>> config.add_option('eta', float, 2, 'HBTUNE_ETA')
    >>> config.eta
    2.0
    >>> config.load_yaml('some_config.yaml')
    >>> config.eta
    3.0
    >>> os.environ['HBTUNE_ETA'] = '4'
    >>> config.eta
    4.0
    >>> config.eta = 5
    >>> config.eta
    5.0

    """

    SPECIAL_KEYS = ["_config", "_subconfigs", "_yaml", "_default", "_env_var", "_help"]

    def __init__(self):
        self._config = {}
        self._subconfigs = {}

    def load_yaml(self, path):
        """Load yaml file and set global default configuration

        Raises
        -------
        ConfigurationError
            If some option in the yaml file does not exist in the config

        """
        with open(path, encoding="utf8") as f:
            cfg = yaml.safe_load(f)

        if cfg is None:
            return

        self._load_yaml_dict(cfg)

    def _load_yaml_dict(self, config):
        for key in self._config:
            if key not in config:
                continue
            value = config.pop(key)
            logger.debug(
                'Overwritting "%s" default %s with %s',
                key,
                self._config[key].get("default"),
                value,
            )
            self._validate(key, value)
            self._config[key]["yaml"] = value

        for key, subconfig in self._subconfigs.items():
            if key in config:
                # pylint: disable=protected-access
                subconfig._load_yaml_dict(config.pop(key))

        if config:
            raise ConfigurationError(
                f"Configuration does not have an attribute '{next(iter(config))}'."
            )

    def __getattr__(self, key):
        """Get the value of the option

        Raises
        -------
        ConfigurationError
            If the option does not exist or has no value

        """
        if key.startswith("__") or key in self.SPECIAL_KEYS:
            raise AttributeError(key)

        if key in self._subconfigs:
            return self._subconfigs[key]

        if key not in self._config:
            raise ConfigurationError(
                f"Configuration does not have an attribute '{key}'."
            )

        setting = self._config[key]
        if "value" in setting:
            value = setting["value"]
        elif "env_var" in setting and setting["env_var"] in os.environ:
            value = os.environ[setting["env_var"]]
            if setting["type"] in (list, tuple):
                value = value.split(":")
        elif "yaml" in setting:
            value = setting["yaml"]
        elif "default" in setting:
            value = setting["default"]
        else:
            raise ConfigurationError(
                f"Configuration not set and no default provided: {key}."
            )

        return setting["type"](value)

    def __setattr__(self, key, value):
        """Set option value or subconfiguration

        Raises
        ------
        TypeError
            If the value has an invalid type for the option, or if no option exists for the
            given key and the value is not a configuration object.

        """
        key = _curate(key)
        if key in ["_config", "_subconfigs"]:
            super().__setattr__(key, value)

        elif key in self._config:
            self._validate(key, value)
            self._config[key]["value"] = value

        elif key in self._subconfigs:
            raise ValueError(f"Configuration already contains subconfiguration {key}")

        elif isinstance(value, Configuration):
            self._subconfigs[key] = value

        else:
            raise TypeError(
                f"Can only set {key} as a Configuration, not {type(value)}. "
                "Use add_option to set a new option."
            )

    def _validate(self, key, value):
        if isinstance(value, Configuration):
            raise TypeError(f"Cannot overwrite option {key} with a configuration")

        try:
            self._config[key]["type"](value)
        except (TypeError, ValueError) as e:
            raise TypeError(
                f"Option {key} of type {self._config[key]['type']} "
                f"cannot be set to {value} with type {type(value)}"
            ) from e

    def __setitem__(self, key, value):
        """Set option value using dict-like syntax, ex: ``config['hyperband.eta'] = 3``"""
        keys = list(map(_curate, key.split(".")))

        if len(keys) == 2 and keys[-1] in self.SPECIAL_KEYS:
            key, field = keys
            self._validate(key, value)
            self._config[key][field.lstrip("_")] = value
        elif len(keys) == 1:
            setattr(self, keys[0], value)
        else:
            subconfig = getattr(self, keys[0])
            subconfig[".".join(keys[1:])] = value

    def __getitem__(self, key):
        """Get option value using dict-like syntax, ex: ``config['hyperband.eta']``"""
        keys = list(map(_curate, key.split(".")))

        if len(keys) == 2 and keys[1] in self.SPECIAL_KEYS:
            if keys[0] not in self._config:
                raise ConfigurationError(
                    f"Configuration does not have an attribute '{keys[0]}'."
                )
            return self._config[keys[0]].get(keys[1][1:], None)

        if len(keys) > 1:
            return getattr(self, keys[0])[".".join(keys[1:])]

        return getattr(self, keys[0])

    def add_option(self, key, option_type, default=NOT_SET, env_var=None, help=None):
        """Add a configuration setting.

        Parameters
        ----------
        key : str
            The name of the configuration setting. Must be a valid Python attribute name.
        option_type : function
            A function such as ``float``, ``int`` or ``str`` which takes the configuration
            value and returns an object of the correct type. Values from environment variables
            are always strings.
        default : object, optional
            The default configuration to return if not set. By default none
            is set and an error is raised instead.
        env_var : str, optional
            The environment variable name that holds this configuration value.
        help : str, optional
            Documentation for the option. Default help message is 'Undocumented'.

        """
        key = _curate(key)
        if key in self._config or key in self._subconfigs:
            raise ValueError(f"Configuration already contains {key}")

        self._config[key] = {"type": option_type}
        if env_var is not None:
            self._config[key]["env_var"] = env_var
        if default is not NOT_SET:
            self._config[key]["default"] = default

        if help is None:
            help = "Undocumented"
        if default is not NOT_SET:
            help += f" (default: {default})"
        self._config[key]["help"] = help

    def help(self, key):
        """Return the help message for the given option."""
        return self[key + "._help"]

    def __contains__(self, key):
        """Return True if the option is defined."""
        return key in self._config or key in self._subconfigs

    def to_dict(self):
        """Return a dictionary representation of the configuration"""
        config = {key: self[key] for key in self._config}
        config.update({key: sub.to_dict() for key, sub in self._subconfigs.items()})
        return config

    def __repr__(self) -> str:
        return pprint.pformat(self.to_dict())
