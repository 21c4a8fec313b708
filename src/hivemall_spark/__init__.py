"""
hivemall-spark: Hivemall machine-learning functions for Spark DataFrames.
"""

from .__version__ import __version__
from .catalog import FunctionCatalog, ddl_script
from .exceptions import (
    AnalysisError,
    ConfigError,
    HivemallError,
    RegistrationError,
    UDFArgumentError,
    UnknownFunctionError,
)
from .grouped import GroupedDataEx, GroupType
from .ops import HivemallOps, hivemall, install_accessor
from .registry import FunctionBinding, FunctionType, get_binding, list_bindings
from .utils.config_parser import HivemallConfig

__all__ = [
    "__version__",
    "AnalysisError",
    "ConfigError",
    "FunctionBinding",
    "FunctionCatalog",
    "FunctionType",
    "GroupType",
    "GroupedDataEx",
    "HivemallConfig",
    "HivemallError",
    "HivemallOps",
    "RegistrationError",
    "UDFArgumentError",
    "UnknownFunctionError",
    "ddl_script",
    "get_binding",
    "hivemall",
    "install_accessor",
    "list_bindings",
]
