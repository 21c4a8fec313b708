from .config_parser import ConfigParser, HivemallConfig, SparkConfig, load_config
from .logging_config import StructuredFormatter, setup_logging

__all__ = [
    "ConfigParser",
    "HivemallConfig",
    "SparkConfig",
    "load_config",
    "StructuredFormatter",
    "setup_logging",
]
