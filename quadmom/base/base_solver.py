# -*- coding: utf-8 -*-
"""
Shared parameter handling for the moment solvers.
"""
import os
import numbers
import runpy
from pathlib import Path
from quadmom.errors import ConfigError

# Bundled default configuration
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "..", "config", "harness_config.py")


def load_config(config_path=None):
    """
    Load a configuration dict from a Python config file.

    The file must define a module-level dict named ``config``. If no path is
    given the bundled ``quadmom/config/harness_config.py`` is used.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    ConfigError
        If the file does not define a ``config`` dict.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    config_path = os.path.abspath(config_path)
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found at: {config_path}.")
    conf = runpy.run_path(config_path)
    config = conf.get('config')
    if not isinstance(config, dict):
        raise ConfigError(f"Config file {config_path} must define a dict named 'config'.")
    return config


class BaseSolver():
    # Name of the config section read by the subclass
    config_section = None

    # Parameters that must be strictly positive
    positive_params = ()

    def _init_base_parameters(self):
        # BASELINE PATH
        self.work_dir = Path(os.getcwd()).resolve()

    def _check_params(self):
        """
        Check the validity of solver parameters.
        """
        for name in self.positive_params:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real) or not value > 0:
                raise ConfigError(f"{name} must be positive, got {value}.")

    def _load_attributes(self, config_path=None):
        """
        Load attributes from the solver's section of a configuration file.

        Every non-None entry of ``config[self.config_section]`` is assigned to the
        solver instance. Unknown keys are rejected so that typos do not pass
        silently.

        Parameters
        ----------
        config_path : str, optional
            Path to the configuration file. Defaults to the bundled config.
        """
        config = load_config(config_path)
        self._set_params(config.get(self.config_section, {}))

    def _set_params(self, params):
        for key, value in params.items():
            if value is None:
                continue
            if not hasattr(self, key):
                raise ConfigError(f"Unknown parameter '{key}' for {type(self).__name__}.")
            setattr(self, key, value)

    def get_params(self):
        """Return the solver's parameters as a plain dict (picklable)."""
        return {key: value for key, value in vars(self).items() if key != "work_dir"}
