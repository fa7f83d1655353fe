"""
Configuration Loader

Loads funcpipe settings from funcpipe.json in the project root.
Environment variables always take precedence over config file values.
Loading never writes to os.environ; load_config() additionally hands the
file's log settings to the trace logger.

Config file location (in order of precedence):
1. FUNCPIPE_PROJECT_ROOT/funcpipe.json (if FUNCPIPE_PROJECT_ROOT is set)
2. CWD/funcpipe.json

Supported settings in funcpipe.json:
{
    "strict_comparators": false,   // overridden by FUNCPIPE_STRICT_COMPARATORS
    "log_level": "WARNING",        // overridden by FUNCPIPE_LOG_LEVEL
    "debug_log": "trace.log",      // overridden by FUNCPIPE_DEBUG_LOG
    "log_dir": ".funcpipe"         // overridden by FUNCPIPE_LOG_DIR
}
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .logging_config import get_trace_logger, reconfigure_trace_logger

logger = get_trace_logger()


@dataclass(frozen=True)
class PipelineSettings:
    """Typed view of the resolved configuration.

    ::: This is-in-layer Service-Layer.
    ::: This is a value-object.
    ::: This is stateless.
    """
    strict_comparators: bool = False
    log_level: str = "WARNING"
    debug_log: Optional[str] = None
    log_dir: Optional[str] = None


class ConfigLoader:
    """
    Loads configuration from funcpipe.json file.

    ::: This is-in-layer Service-Layer.
    ::: This is a loader.
    ::: This is stateless.

    Priority: Environment variables > funcpipe.json > defaults
    """

    CONFIG_FILENAME = "funcpipe.json"

    # Mapping from funcpipe.json keys to environment variable names
    CONFIG_KEY_TO_ENV = {
        "strict_comparators": "FUNCPIPE_STRICT_COMPARATORS",
        "log_level": "FUNCPIPE_LOG_LEVEL",
        "debug_log": "FUNCPIPE_DEBUG_LOG",
        "log_dir": "FUNCPIPE_LOG_DIR",
    }

    LOGGING_KEYS = ("log_level", "debug_log", "log_dir")

    DEFAULTS = {
        "strict_comparators": False,
        "log_level": "WARNING",
        "debug_log": None,
        "log_dir": None,
    }

    def __init__(self):
        self._config: Dict[str, Any] = {}
        self._config_path: Optional[Path] = None
        self._loaded = False

    def load(self, project_root: Optional[Path] = None) -> bool:
        """
        Load configuration from funcpipe.json.

        Args:
            project_root: Project root directory. If None, uses FUNCPIPE_PROJECT_ROOT or CWD.

        Returns:
            True if config file was found and loaded, False otherwise.
        """
        if self._loaded:
            return self._config_path is not None

        if project_root is None:
            env_root = os.getenv("FUNCPIPE_PROJECT_ROOT")
            project_root = Path(env_root) if env_root else Path.cwd()

        config_path = Path(project_root) / self.CONFIG_FILENAME
        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    self._config = json.load(f)
                self._config_path = config_path
                logger.debug("Loaded config from: %s", config_path)
            except json.JSONDecodeError as e:
                logger.warning("Invalid JSON in %s: %s", config_path, e)
            except OSError as e:
                logger.warning("Error loading %s: %s", config_path, e)

        self._loaded = True
        return self._config_path is not None

    def apply_logging(self) -> bool:
        """
        Hand file-configured log settings to the trace logger.

        The environment is left untouched; FUNCPIPE_* variables that are
        set still take precedence inside the logger.

        Returns:
            True if the trace logger was rebuilt, False if the file has no
            logging settings.
        """
        values = {
            key: str(self._config[key])
            for key in self.LOGGING_KEYS
            if self._config.get(key) is not None
        }
        if not values:
            return False
        logger.debug("Log settings from %s: %s", self.CONFIG_FILENAME, values)
        reconfigure_trace_logger(**values)
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value, environment first, then file."""
        env_var = self.CONFIG_KEY_TO_ENV.get(key)
        if env_var:
            env_value = os.getenv(env_var)
            if env_value is not None:
                return self._coerce(key, env_value)
        return self._config.get(key, default)

    def _coerce(self, key: str, raw: str) -> Any:
        """Convert an environment string to the type of the key's default."""
        default_value = self.DEFAULTS.get(key)
        if isinstance(default_value, bool):
            return raw.strip().lower() in ('true', '1', 'yes')
        return raw

    def get_settings(self) -> PipelineSettings:
        """
        Get pipeline settings with defaults applied.

        Returns:
            PipelineSettings built from env vars, funcpipe.json and defaults.
        """
        values = {}
        for key, default_value in self.DEFAULTS.items():
            values[key] = self.get(key, default_value)
        values["log_level"] = str(values["log_level"]).upper()
        values["strict_comparators"] = bool(values["strict_comparators"])
        return PipelineSettings(**values)

    @property
    def config_path(self) -> Optional[Path]:
        """Path to the loaded config file, or None if not loaded."""
        return self._config_path

    @property
    def config(self) -> Dict[str, Any]:
        """The loaded configuration dictionary."""
        return self._config.copy()


# Global singleton instance
_config_loader: Optional[ConfigLoader] = None


def get_config_loader() -> ConfigLoader:
    """Get the global config loader instance."""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def reset_config_loader() -> None:
    """Drop the global loader so the next lookup re-reads the environment."""
    global _config_loader
    _config_loader = None


def load_config(project_root: Optional[Path] = None) -> bool:
    """
    Load configuration from funcpipe.json and apply its log settings.

    Args:
        project_root: Project root directory. If None, auto-detects.

    Returns:
        True if config was loaded, False otherwise.
    """
    loader = get_config_loader()
    loaded = loader.load(project_root)
    if loaded:
        loader.apply_logging()
    return loaded


def get_settings() -> PipelineSettings:
    """Load (once) and return the resolved settings.

    Only reads; neither the environment nor the trace logger is changed.
    """
    loader = get_config_loader()
    loader.load()
    return loader.get_settings()
