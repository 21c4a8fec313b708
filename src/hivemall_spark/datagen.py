from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import IntegerType, StructField, StructType

from .ops import HivemallOps


def datagen_options(n_examples: int = 1000,
                    n_features: int = 10,
                    n_dims: int = 200,
                    seed: int = 43,
                    dense: bool = False) -> str:
    options = f"-n_examples {n_examples} -n_features {n_features} -n_dims {n_dims} -seed {seed}"
    if dense:
        options += " -dense"
    return options


def regression_datagen(spark: SparkSession,
                       n_examples: int = 1000,
                       n_features: int = 10,
                       n_dims: int = 200,
                       seed: int = 43,
                       dense: bool = False,
                       n_partitions: int = 1) -> DataFrame:
    """
    Generate a synthetic logistic regression dataset with ``lr_datagen``.

    Each seed row yields ``n_examples`` examples, so ``n_partitions`` seed rows
    produce ``n_partitions * n_examples`` rows in total.
    """
    if n_partitions < 1:
        raise ValueError("n_partitions must be positive")

    schema = StructType([StructField("data", IntegerType(), True)])
    seed_df = spark.createDataFrame([(i,) for i in range(n_partitions)], schema)
    if n_partitions > 1:
        seed_df = seed_df.repartition(n_partitions)

    options = datagen_options(n_examples, n_features, n_dims, seed, dense)
    return HivemallOps(seed_df).lr_datagen(options)
