"""
Pytest configuration and shared fixtures for hivemall-spark tests.

Unit tests never start Spark: the SparkSession and DataFrames are MagicMocks
and the Column-building functions of ``pyspark.sql.functions`` are patched.
"""

import logging
import pytest
from unittest.mock import DEFAULT, MagicMock, patch

from pyspark.sql.types import (
    ArrayType,
    DoubleType,
    FloatType,
    IntegerType,
    StringType,
    StructField,
    StructType,
)

from hivemall_spark.catalog import FunctionCatalog, set_default_catalog
from hivemall_spark.utils.config_parser import HivemallConfig, JAR_ENV, MIX_SERVERS_ENV

APPLICATION_ID = "app-20261018093500-0001"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep HIVEMALL_* variables of the host out of the tests."""
    monkeypatch.delenv(MIX_SERVERS_ENV, raising=False)
    monkeypatch.delenv(JAR_ENV, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("hivemall_spark")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def spark_functions():
    """
    Patch the Column builders of pyspark.sql.functions.

    ``col`` returns one distinct mock per column name, so call assertions can
    tell the arguments apart.
    """
    with patch.multiple("pyspark.sql.functions",
                        call_function=DEFAULT, col=DEFAULT, lit=DEFAULT,
                        explode=DEFAULT, count=DEFAULT, exp=DEFAULT) as mocks:
        columns = {}

        def named_column(name):
            if name not in columns:
                columns[name] = MagicMock(name=f"col({name})")
            return columns[name]

        mocks['col'].side_effect = named_column
        yield mocks


@pytest.fixture
def mock_spark():
    spark = MagicMock(name="SparkSession")
    spark.sparkContext.applicationId = APPLICATION_ID
    return spark


@pytest.fixture
def df_schema():
    return StructType([
        StructField("rowid", StringType(), True),
        StructField("features", ArrayType(StringType()), True),
        StructField("label", StringType(), True),
        StructField("int_label", IntegerType(), True),
        StructField("score", FloatType(), True),
        StructField("weight", FloatType(), True),
        StructField("conv", FloatType(), True),
        StructField("value", DoubleType(), True),
        StructField("predict", FloatType(), True),
        StructField("target", FloatType(), True),
        StructField("predict_dbl", DoubleType(), True),
        StructField("predict_arr", ArrayType(IntegerType()), True),
        StructField("target_arr", ArrayType(IntegerType()), True),
    ])


@pytest.fixture
def mock_df(mock_spark, df_schema):
    """A DataFrame double whose ``df[name]`` returns one mock per column."""
    df = MagicMock(name="DataFrame")
    df.sparkSession = mock_spark
    df.schema = df_schema
    df.columns = df_schema.fieldNames()

    columns = {}

    def get_column(name):
        if name not in columns:
            columns[name] = MagicMock(name=f"df[{name}]")
        return columns[name]

    df.__getitem__.side_effect = get_column
    return df


@pytest.fixture
def hivemall_config():
    return HivemallConfig()


@pytest.fixture
def catalog(hivemall_config):
    return FunctionCatalog(hivemall_config)


@pytest.fixture
def default_catalog(catalog):
    """Install a fresh catalog as the package default for module-level functions."""
    set_default_catalog(catalog)
    yield catalog
    set_default_catalog(None)
