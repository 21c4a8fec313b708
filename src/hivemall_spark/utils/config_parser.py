import os
import re
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field, ValidationError, field_validator
from enum import Enum

from ..exceptions import ConfigError

logger = logging.getLogger(__name__)

JAR_ENV = "HIVEMALL_JAR"
MIX_SERVERS_ENV = "HIVEMALL_MIX_SERVERS"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _scalar_to_str(value: Any) -> Any:
    # Substituted placeholders arrive as native YAML scalars
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class SparkConfig(BaseModel):
    app_name: str = "hivemall-spark"
    master: Optional[str] = None
    enable_hive_support: bool = True
    config: Dict[str, str] = Field(default_factory=dict)

    @field_validator('app_name', 'master', mode='before')
    @classmethod
    def scalar_to_str(cls, value: Any) -> Any:
        return _scalar_to_str(value)

    @field_validator('config', mode='before')
    @classmethod
    def config_values_to_str(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: _scalar_to_str(item) for key, item in value.items()}
        return value


class HivemallConfig(BaseModel):
    jar_path: Optional[str] = None
    # None defers to HIVEMALL_MIX_SERVERS at call time
    mix_servers: Optional[str] = None
    auto_register: bool = True
    log_level: LogLevel = LogLevel.INFO
    spark: SparkConfig = Field(default_factory=SparkConfig)

    @field_validator('jar_path', 'mix_servers', mode='before')
    @classmethod
    def scalar_to_str(cls, value: Any) -> Any:
        return _scalar_to_str(value)

    @field_validator('jar_path', 'mix_servers')
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not str(value).strip():
            return None
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> 'HivemallConfig':
        """
        Build a configuration from HIVEMALL_* environment variables.

        Explicit keyword overrides win over the environment.
        """
        values: Dict[str, Any] = {
            'jar_path': os.environ.get(JAR_ENV),
            'mix_servers': os.environ.get(MIX_SERVERS_ENV),
        }
        values.update(overrides)
        return cls(**values)


class ConfigParser:
    """
    Configuration parser that handles YAML loading, environment variable substitution,
    and Pydantic validation.
    """

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self):
        self.config = None

    def load_config(self, config_path: Union[str, Path]) -> HivemallConfig:
        """
        Load and parse configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Validated HivemallConfig object

        Raises:
            ConfigError: If the file is missing, is not valid YAML, or fails validation
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        logger.info(f"Loading configuration from: {config_path}")

        try:
            with open(config_path, 'r') as file:
                raw_config = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML config: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(raw_config).__name__}")

        config_dict = self._substitute_env_vars(raw_config)

        try:
            self.config = HivemallConfig(**config_dict)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        logger.info("Configuration loaded and validated successfully")
        return self.config

    def _substitute_env_vars(self, obj: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports syntax: ${VAR_NAME} or ${VAR_NAME:default_value}
        """
        if isinstance(obj, dict):
            return {key: self._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [self._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            return self._substitute_string_env_vars(obj)
        else:
            return obj

    def _substitute_string_env_vars(self, text: str) -> Any:
        def replace_env_var(match):
            var_spec = match.group(1)

            if ':' in var_spec:
                var_name, default_value = var_spec.split(':', 1)
                value = os.getenv(var_name, default_value)
            else:
                var_name = var_spec
                value = os.getenv(var_name)

                if value is None:
                    raise ConfigError(
                        f"Environment variable '{var_name}' is not set and no default value provided")

            return value

        substituted = self.ENV_VAR_PATTERN.sub(replace_env_var, text)
        # A value that was a single placeholder gets a native type
        if self.ENV_VAR_PATTERN.fullmatch(text):
            return self._convert_value(substituted)
        return substituted

    def _convert_value(self, value: str) -> Union[str, int, float, bool]:
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' not in value:
                return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get_config(self) -> HivemallConfig:
        if self.config is None:
            raise ConfigError("No configuration loaded. Call load_config() first.")
        return self.config

    def save_config(self, output_path: Union[str, Path], exclude_none: bool = True) -> None:
        """
        Save the current configuration to a YAML file.

        Args:
            output_path: Path to save the configuration
            exclude_none: Whether to exclude None values from output
        """
        config = self.get_config()

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = config.model_dump(mode='json', exclude_none=exclude_none)

        with open(output_path, 'w') as file:
            yaml.dump(config_dict, file, default_flow_style=False, indent=2)

        logger.info(f"Configuration saved to: {output_path}")


def load_config(config_path: Optional[Union[str, Path]] = None) -> HivemallConfig:
    """
    Load configuration from a YAML file, or from the environment when no path is given.
    """
    if config_path is None:
        return HivemallConfig.from_env()
    return ConfigParser().load_config(config_path)
