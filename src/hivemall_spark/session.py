import logging
from typing import Optional

from pyspark.sql import SparkSession

from .utils.config_parser import HivemallConfig

logger = logging.getLogger(__name__)


def create_spark_session(config: Optional[HivemallConfig] = None) -> SparkSession:
    """
    Build (or reuse) a SparkSession able to run Hivemall functions.

    Hive support is required for Hive UDF/UDTF/UDAF classes; the Hivemall jar
    is put on the class path when configured.
    """
    config = config or HivemallConfig.from_env()
    spark_config = config.spark

    builder = SparkSession.builder.appName(spark_config.app_name)
    if spark_config.master:
        builder = builder.master(spark_config.master)
    if config.jar_path:
        builder = builder.config("spark.jars", config.jar_path)
    for key, value in spark_config.config.items():
        builder = builder.config(key, value)
    if spark_config.enable_hive_support:
        builder = builder.enableHiveSupport()

    spark = builder.getOrCreate()
    logger.info(f"Spark session ready: {spark_config.app_name} (Spark {spark.version})")
    return spark
