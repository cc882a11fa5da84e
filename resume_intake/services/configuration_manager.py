"""Configuration Manager for handling application configuration and settings."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..parsers.vocabulary import DEFAULT_VOCABULARY, KeywordVocabulary
from ..utils.exceptions import ConfigurationError
from ..utils.logging import get_logger

ENV_ENVIRONMENT = "RESUME_INTAKE_ENV"
ENV_LOG_LEVEL = "RESUME_INTAKE_LOG_LEVEL"
ENV_MAX_FILE_SIZE_MB = "RESUME_INTAKE_MAX_FILE_SIZE_MB"
ENV_DECODE_TIMEOUT = "RESUME_INTAKE_DECODE_TIMEOUT"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LoggingConfig:
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "human"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    console_output: bool = True
    file_output: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        """Create LoggingConfig from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class ParserConfig:
    """Limits applied by the parsing pipeline."""

    max_file_size: int = 10 * 1024 * 1024  # 10MB
    min_text_length: int = 50
    decode_timeout: float = 30.0
    max_achievements_per_entry: int = 5

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create ParserConfig from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class VocabularyConfig:
    """Keywords added to the built-in vocabulary."""

    extra_technologies: List[str] = field(default_factory=list)
    extra_technical_keywords: List[str] = field(default_factory=list)
    extra_soft_keywords: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VocabularyConfig":
        """Create VocabularyConfig from dictionary."""
        return cls(**{k: list(v or []) for k, v in data.items() if k in cls.__dataclass_fields__})


class AppConfig(BaseModel):
    """Main application configuration model."""

    app_name: str = Field(default="Resume Intake", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment")

    # Component configurations
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")
    parser: ParserConfig = Field(default_factory=ParserConfig, description="Parser limits")
    vocabulary: VocabularyConfig = Field(default_factory=VocabularyConfig, description="Extra keywords")

    model_config = ConfigDict(validate_assignment=True)


class ConfigurationManager:
    """Manages application configuration and settings.

    Sources are applied in order: built-in defaults, ``config.yaml``,
    ``config.<environment>.yaml`` and finally environment variables
    (optionally loaded from a ``.env`` file).
    """

    def __init__(self, config_path: str = "config", env_file: str = ".env"):
        """Initialize the configuration manager.

        Args:
            config_path: Path to configuration directory.
            env_file: Path to environment file.
        """
        self.config_path = Path(config_path)
        self.env_file = Path(env_file)
        self.config: Optional[AppConfig] = None
        self.logger = get_logger("configuration_manager")

    def initialize(self) -> AppConfig:
        """Load and validate the configuration.

        Returns:
            The loaded configuration.

        Raises:
            ConfigurationError: If a file cannot be read or a value is invalid.
        """
        try:
            self._load_environment_variables()
            config_data = self._load_configuration_files()
            self._apply_environment_overrides(config_data)
            self.config = self._build_config(config_data)
            self._validate_configuration()

            self.logger.info(f"Configuration loaded for environment {self.config.environment}")
            return self.config

        except ConfigurationError:
            raise
        except Exception as e:
            self.logger.error(f"Failed to initialize ConfigurationManager: {str(e)}")
            raise ConfigurationError(f"Configuration initialization failed: {str(e)}")

    def _load_environment_variables(self) -> None:
        """Load environment variables from .env file."""
        if self.env_file.exists():
            load_dotenv(self.env_file)
            self.logger.info(f"Loaded environment variables from {self.env_file}")

    def _load_configuration_files(self) -> Dict[str, Any]:
        """Merge the YAML files over the built-in defaults."""
        config_data = AppConfig().model_dump()

        main_config_file = self.config_path / "config.yaml"
        if main_config_file.exists():
            config_data = self._merge(config_data, self._load_yaml_file(main_config_file))
            self.logger.info(f"Loaded main configuration from {main_config_file}")

        environment = os.getenv(ENV_ENVIRONMENT) or config_data.get("environment") or "development"
        config_data["environment"] = environment
        env_config_file = self.config_path / f"config.{environment}.yaml"
        if env_config_file.exists():
            config_data = self._merge(config_data, self._load_yaml_file(env_config_file))
            config_data["environment"] = environment
            self.logger.info(f"Loaded environment configuration from {env_config_file}")

        return config_data

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML file content.

        Args:
            file_path: Path to YAML file.

        Returns:
            Dictionary containing file content.

        Raises:
            ConfigurationError: If the file is not valid YAML or not a mapping.
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load YAML file {file_path}: {str(e)}", config_key=str(file_path))

        if not isinstance(content, dict):
            raise ConfigurationError(f"Configuration file {file_path} must contain a mapping", config_key=str(file_path))
        return content

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _apply_environment_overrides(self, config_data: Dict[str, Any]) -> None:
        """Apply RESUME_INTAKE_* environment variables."""
        log_level = os.getenv(ENV_LOG_LEVEL)
        if log_level:
            config_data["logging"]["level"] = log_level.upper()

        max_size_mb = os.getenv(ENV_MAX_FILE_SIZE_MB)
        if max_size_mb:
            config_data["parser"]["max_file_size"] = int(self._parse_number(ENV_MAX_FILE_SIZE_MB, max_size_mb) * 1024 * 1024)

        decode_timeout = os.getenv(ENV_DECODE_TIMEOUT)
        if decode_timeout:
            config_data["parser"]["decode_timeout"] = self._parse_number(ENV_DECODE_TIMEOUT, decode_timeout)

    @staticmethod
    def _parse_number(name: str, raw: str) -> float:
        try:
            return float(raw)
        except ValueError:
            raise ConfigurationError(f"{name} must be a number, got {raw!r}", config_key=name)

    def _build_config(self, config_data: Dict[str, Any]) -> AppConfig:
        """Create the AppConfig, dropping unknown keys from component sections."""
        try:
            return AppConfig(
                app_name=config_data.get("app_name", "Resume Intake"),
                version=str(config_data.get("version", "1.0.0")),
                debug=config_data.get("debug", False),
                environment=config_data.get("environment", "development"),
                logging=LoggingConfig.from_dict(config_data.get("logging") or {}),
                parser=ParserConfig.from_dict(config_data.get("parser") or {}),
                vocabulary=VocabularyConfig.from_dict(config_data.get("vocabulary") or {}),
            )
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(f"Invalid configuration: {str(e)}")

    def _validate_configuration(self) -> None:
        """Validate the loaded configuration."""
        if not self.config:
            raise ConfigurationError("Configuration not loaded")

        parser = self.config.parser
        if parser.decode_timeout <= 0:
            raise ConfigurationError("decode_timeout must be greater than 0", config_key="parser.decode_timeout")
        if parser.max_file_size < 1:
            raise ConfigurationError("max_file_size must be at least 1 byte", config_key="parser.max_file_size")
        if parser.min_text_length < 0:
            raise ConfigurationError("min_text_length must not be negative", config_key="parser.min_text_length")
        if parser.max_achievements_per_entry < 1:
            raise ConfigurationError(
                "max_achievements_per_entry must be at least 1",
                config_key="parser.max_achievements_per_entry"
            )

        if self.config.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level {self.config.logging.level}", config_key="logging.level")

        self.logger.debug("Configuration validation completed successfully")

    def get_config(self) -> AppConfig:
        """Get the current configuration.

        Returns:
            Current application configuration.

        Raises:
            ConfigurationError: If configuration is not loaded.
        """
        if not self.config:
            raise ConfigurationError("Configuration not loaded")
        return self.config

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific configuration setting.

        Args:
            key: Configuration key (dot notation supported).
            default: Default value if key not found.

        Returns:
            Configuration value.
        """
        if not self.config:
            return default

        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, dict):
                if k not in value:
                    return default
                value = value[k]
            elif hasattr(value, k):
                value = getattr(value, k)
            else:
                return default
        return value

    def get_parser_config(self) -> ParserConfig:
        """Get the parser limits."""
        return self.get_config().parser

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration as keyword arguments for ``setup_logging``.

        Returns:
            Dictionary containing logging configuration.
        """
        if not self.config:
            return {"level": "INFO"}

        config = self.config.logging
        return {
            "level": config.level.upper(),
            "log_file": config.file_path,
            "enable_console": config.console_output,
            "enable_file": config.file_output,
            "structured": config.format == "json",
            "max_file_size": config.max_file_size,
            "backup_count": config.backup_count,
        }

    def build_vocabulary(self) -> KeywordVocabulary:
        """Merge the configured extra keywords into the built-in vocabulary."""
        extra = self.get_config().vocabulary
        if not (extra.extra_technologies or extra.extra_technical_keywords or extra.extra_soft_keywords):
            return DEFAULT_VOCABULARY
        return DEFAULT_VOCABULARY.extended(
            technologies=extra.extra_technologies,
            technical_keywords=extra.extra_technical_keywords,
            soft_keywords=extra.extra_soft_keywords,
        )

    def get_environment(self) -> str:
        """Get current environment."""
        return self.get_config().environment
