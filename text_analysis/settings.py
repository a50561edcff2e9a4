"""
Configuration management for the text analysis pipeline.

Handles global configuration loading from a TOML file, environment variable
integration, and defaults for every tunable of the pipeline.
"""

from pathlib import Path
from typing import Dict, Any, Optional
import tomllib
import sys
import os
from dataclasses import dataclass, field

from .error_handler import ConfigurationError, ErrorSeverity


CONFIG_ENV_VAR = "TEXT_ANALYSIS_CONFIG"
STORAGE_ENV_VAR = "OZONE_ZSEI_PATH"
DEFAULT_CONFIG_PATH = Path.home() / ".text-analysis" / "config.toml"


@dataclass
class GlobalConfig:
    """Global pipeline configuration."""

    storage_path: Path = Path("./zsei_data")

    log_debug: bool = False
    log_to_file: bool = False
    log_dir: Path = field(default_factory=lambda: Path.home() / ".text-analysis" / "logs")
    log_production: bool = False
    log_masking: bool = True

    default_keyword_limit: int = 20
    normalize_keyword_limit: int = 30
    similar_keyword_limit: int = 10
    similar_result_limit: int = 10

    max_chunk_tokens: int = 4000
    overlap_tokens: int = 200
    normalize_context_limit: int = 100000
    normalize_overlap_tokens: int = 100

    amt_depth: int = 3
    analyze_amt_depth: int = 2


class Settings:
    """Settings management singleton."""

    _instance: Optional['Settings'] = None
    _global_config: GlobalConfig
    _config_path: Path

    def __new__(cls) -> 'Settings':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self, config_path: Optional[Path] = None) -> None:
        """Initialize settings from the configuration file and environment."""
        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            config_path = Path(env_path).expanduser() if env_path else DEFAULT_CONFIG_PATH
        self._config_path = config_path
        self._load_global_config()

    def _load_global_config(self) -> None:
        """Load global configuration with defaults."""
        config = GlobalConfig()
        if self._config_path.exists():
            try:
                with open(self._config_path, "rb") as f:
                    config_data = tomllib.load(f)
                config = self._merge_config(config_data)
            except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as e:
                # Runs at import, before logging is configured
                error = ConfigurationError("file", str(e), cause=e, severity=ErrorSeverity.WARNING)
                print(f"Warning: Failed to load config from {self._config_path}: {error.message}", file=sys.stderr)
                config = GlobalConfig()

        storage_override = os.environ.get(STORAGE_ENV_VAR)
        if storage_override:
            config.storage_path = Path(storage_override)

        self._global_config = config

    def _merge_config(self, config_data: Dict[str, Any]) -> GlobalConfig:
        """Merge configuration data with defaults."""
        config = GlobalConfig()

        if "storage" in config_data:
            storage_config = config_data["storage"]
            if "path" in storage_config:
                config.storage_path = Path(storage_config["path"]).expanduser()

        if "logging" in config_data:
            log_config = config_data["logging"]
            config.log_debug = bool(log_config.get("debug", config.log_debug))
            config.log_to_file = bool(log_config.get("to_file", config.log_to_file))
            config.log_production = bool(log_config.get("production", config.log_production))
            config.log_masking = bool(log_config.get("masking", config.log_masking))
            if "dir" in log_config:
                config.log_dir = Path(log_config["dir"]).expanduser()

        if "analysis" in config_data:
            analysis_config = config_data["analysis"]
            config.default_keyword_limit = int(analysis_config.get("keyword_limit", config.default_keyword_limit))
            config.normalize_keyword_limit = int(analysis_config.get("normalize_keyword_limit", config.normalize_keyword_limit))
            config.similar_keyword_limit = int(analysis_config.get("similar_keyword_limit", config.similar_keyword_limit))
            config.similar_result_limit = int(analysis_config.get("similar_result_limit", config.similar_result_limit))

        if "chunking" in config_data:
            chunk_config = config_data["chunking"]
            config.max_chunk_tokens = int(chunk_config.get("max_chunk_tokens", config.max_chunk_tokens))
            config.overlap_tokens = int(chunk_config.get("overlap_tokens", config.overlap_tokens))
            config.normalize_context_limit = int(chunk_config.get("context_limit", config.normalize_context_limit))
            config.normalize_overlap_tokens = int(chunk_config.get("normalize_overlap_tokens", config.normalize_overlap_tokens))

        if "amt" in config_data:
            amt_config = config_data["amt"]
            config.amt_depth = int(amt_config.get("depth", config.amt_depth))
            config.analyze_amt_depth = int(amt_config.get("analyze_depth", config.analyze_amt_depth))

        return config

    @property
    def global_config(self) -> GlobalConfig:
        """Get global configuration."""
        return self._global_config

    @property
    def config_path(self) -> Path:
        return self._config_path

    def reload(self, config_path: Optional[Path] = None) -> GlobalConfig:
        """Re-read the configuration file and environment."""
        self._initialize(config_path)
        return self._global_config


# Global settings instance
settings = Settings()
