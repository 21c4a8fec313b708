import logging
import weakref
from typing import Dict, Iterable, List, Optional, Set

from pyspark.sql import SparkSession

from .exceptions import RegistrationError
from .registry import FunctionBinding, get_binding, groups, list_bindings
from .utils.config_parser import HivemallConfig

logger = logging.getLogger(__name__)


def create_function_sql(binding: FunctionBinding) -> str:
    return f"CREATE OR REPLACE TEMPORARY FUNCTION {binding.sql_name} AS '{binding.class_name}'"


def add_jar_sql(jar_path: str) -> str:
    return f"ADD JAR '{jar_path}'"


def ddl_script(jar_path: Optional[str] = None, group: Optional[str] = None) -> str:
    """
    Render the statements that register the Hivemall functions in a Spark session.

    Args:
        jar_path: Hivemall jar to add before the functions are created
        group: Only emit the functions of this group

    Returns:
        A script with one ``;``-terminated statement per line
    """
    lines = []
    if jar_path:
        lines.append(f"{add_jar_sql(jar_path)};")
        lines.append("")

    for name in groups():
        if group is not None and name != group:
            continue
        lines.append(f"-- {name}")
        for binding in list_bindings(group=name):
            lines.append(f"{create_function_sql(binding)};")
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"


class FunctionCatalog:
    """
    Registers Hivemall functions as temporary functions of a SparkSession.

    Each binding is created at most once per session. Sessions are tracked
    through weak references, so a stopped and collected session is forgotten.
    """

    def __init__(self, config: Optional[HivemallConfig] = None):
        self.config = config or HivemallConfig.from_env()
        self._registered: "weakref.WeakKeyDictionary[SparkSession, Set[str]]" = weakref.WeakKeyDictionary()
        self._jars_added: "weakref.WeakKeyDictionary[SparkSession, bool]" = weakref.WeakKeyDictionary()

    def is_registered(self, spark: SparkSession, name: str) -> bool:
        return name in self._registered.get(spark, ())

    def ensure_registered(self, spark: SparkSession, binding: FunctionBinding) -> None:
        if not self.config.auto_register:
            return
        if self.is_registered(spark, binding.name):
            return

        self._add_jar(spark)

        statement = create_function_sql(binding)
        try:
            logger.debug(f"Registering Hivemall function: {statement}")
            spark.sql(statement)
        except Exception as e:
            logger.error(f"Error registering '{binding.name}' ({binding.class_name}): {str(e)}")
            raise RegistrationError(
                f"Failed to register '{binding.name}' as {binding.class_name}: {str(e)}") from e

        self._registered.setdefault(spark, set()).add(binding.name)

    def register(self, spark: SparkSession, names: Iterable[str]) -> List[str]:
        registered = []
        for name in names:
            self.ensure_registered(spark, get_binding(name))
            registered.append(name)
        return registered

    def register_all(self, spark: SparkSession, group: Optional[str] = None) -> List[str]:
        names = [binding.name for binding in list_bindings(group=group)]
        registered = self.register(spark, names)
        logger.info(f"Registered {len(registered)} Hivemall functions")
        return registered

    def _add_jar(self, spark: SparkSession) -> None:
        jar_path = self.config.jar_path
        if not jar_path or self._jars_added.get(spark):
            return
        try:
            logger.info(f"Adding Hivemall jar: {jar_path}")
            spark.sql(add_jar_sql(jar_path))
        except Exception as e:
            logger.error(f"Error adding jar {jar_path}: {str(e)}")
            raise RegistrationError(f"Failed to add Hivemall jar {jar_path}: {str(e)}") from e
        self._jars_added[spark] = True


_default_catalog: Optional[FunctionCatalog] = None
# Catalogs of explicitly configured wrappers, keyed by their serialised config
_config_catalogs: Dict[str, FunctionCatalog] = {}


def default_catalog() -> FunctionCatalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = FunctionCatalog()
    return _default_catalog


def set_default_catalog(catalog: Optional[FunctionCatalog]) -> None:
    global _default_catalog
    _default_catalog = catalog


def catalog_for(config: Optional[HivemallConfig] = None) -> FunctionCatalog:
    """
    Return the catalog shared by every wrapper built with an equal ``config``.

    Without a config this is the default catalog.
    """
    if config is None:
        return default_catalog()
    key = config.model_dump_json()
    if key not in _config_catalogs:
        _config_catalogs[key] = FunctionCatalog(config)
    return _config_catalogs[key]
