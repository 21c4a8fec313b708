"""
Hivemall operations on Spark DataFrames.

``HivemallOps`` wraps a DataFrame and exposes the Hivemall table functions as
methods. Each call registers the function in the DataFrame's session (once) and
selects the generator aliased to the function's output columns, which gives a
``Generate`` node over the DataFrame's plan.
"""

import logging
import random
from functools import partial
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from pyspark.sql import Column, DataFrame, Row
from pyspark.sql import functions as F

from .catalog import FunctionCatalog, catalog_for
from .columns import ColumnOrName, column_name, to_column, to_columns
from .grouped import GroupedDataEx, GroupType
from .mix import set_mix_servers
from .registry import FunctionBinding, get_binding
from .utils.config_parser import HivemallConfig

logger = logging.getLogger(__name__)


def amplify_partition(rows: Iterable[Row], xtimes: int, rng: Optional[random.Random] = None) -> Iterator[Row]:
    """Repeat every row of a partition ``xtimes`` times and shuffle the result."""
    elems = [row for row in rows for _ in range(xtimes)]
    (rng or random).shuffle(elems)
    return iter(elems)


def _training_method(name: str):
    binding = get_binding(name)

    def method(self, *exprs: ColumnOrName) -> DataFrame:
        return self._train(binding, exprs)

    method.__name__ = name
    method.__qualname__ = f"HivemallOps.{name}"
    method.__doc__ = (f"@see {binding.class_name}\n\n"
                      f"Output columns: {', '.join(binding.output_columns)}")
    return method


class HivemallOps:
    """A wrapper of Hivemall for DataFrame."""

    def __init__(self,
                 df: DataFrame,
                 config: Optional[HivemallConfig] = None,
                 catalog: Optional[FunctionCatalog] = None):
        self._df = df
        self._config = config
        if catalog is None:
            catalog = catalog_for(config)
        self._catalog = catalog

    @property
    def df(self) -> DataFrame:
        return self._df

    @property
    def _spark(self):
        return self._df.sparkSession

    def _application_id(self) -> str:
        return self._spark.sparkContext.applicationId

    def _call(self, binding: FunctionBinding, cols: Sequence[Column]) -> Column:
        self._catalog.ensure_registered(self._spark, binding)
        return F.call_function(binding.sql_name, *cols)

    def _generate(self, binding: FunctionBinding, cols: Sequence[Column],
                  output_columns: Optional[Sequence[str]] = None) -> DataFrame:
        if output_columns is None:
            output_columns = binding.output_columns
        generator = self._call(binding, cols)
        return self._df.select(generator.alias(*output_columns))

    def _train(self, binding: FunctionBinding, exprs: Sequence[ColumnOrName]) -> DataFrame:
        mix_servers = self._config.mix_servers if self._config is not None else None
        cols = set_mix_servers(to_columns(exprs), self._application_id, mix_servers)
        return self._generate(binding, cols)

    # regression
    train_adadelta = _training_method("train_adadelta")
    train_adagrad = _training_method("train_adagrad")
    train_arow_regr = _training_method("train_arow_regr")
    train_arowe_regr = _training_method("train_arowe_regr")
    train_arowe2_regr = _training_method("train_arowe2_regr")
    train_logregr = _training_method("train_logregr")
    train_pa1_regr = _training_method("train_pa1_regr")
    train_pa1a_regr = _training_method("train_pa1a_regr")
    train_pa2_regr = _training_method("train_pa2_regr")
    train_pa2a_regr = _training_method("train_pa2a_regr")

    # classifier
    train_perceptron = _training_method("train_perceptron")
    train_pa = _training_method("train_pa")
    train_pa1 = _training_method("train_pa1")
    train_pa2 = _training_method("train_pa2")
    train_cw = _training_method("train_cw")
    train_arow = _training_method("train_arow")
    train_arowh = _training_method("train_arowh")
    train_scw = _training_method("train_scw")
    train_scw2 = _training_method("train_scw2")
    train_adagrad_rda = _training_method("train_adagrad_rda")

    # classifier.multiclass
    train_multiclass_perceptron = _training_method("train_multiclass_perceptron")
    train_multiclass_pa = _training_method("train_multiclass_pa")
    train_multiclass_pa1 = _training_method("train_multiclass_pa1")
    train_multiclass_pa2 = _training_method("train_multiclass_pa2")
    train_multiclass_cw = _training_method("train_multiclass_cw")
    train_multiclass_arow = _training_method("train_multiclass_arow")
    train_multiclass_scw = _training_method("train_multiclass_scw")
    train_multiclass_scw2 = _training_method("train_multiclass_scw2")

    def groupby(self, *cols: ColumnOrName) -> GroupedDataEx:
        """
        Groups the DataFrame using the specified columns, so we can run aggregation on them.

        The returned ``GroupedDataEx`` adds the Hivemall UDAFs: voted_avg,
        weight_voted_avg, argmin_kld, max_label, maxrow, f1score, mae, mse and rmse.
        """
        return GroupedDataEx(self._df, cols, GroupType.GROUPBY, catalog=self._catalog)

    groupBy = groupby

    def rollup(self, *cols: ColumnOrName) -> GroupedDataEx:
        return GroupedDataEx(self._df, cols, GroupType.ROLLUP, catalog=self._catalog)

    def cube(self, *cols: ColumnOrName) -> GroupedDataEx:
        return GroupedDataEx(self._df, cols, GroupType.CUBE, catalog=self._catalog)

    def minhash(self, *exprs: ColumnOrName) -> DataFrame:
        """@see hivemall.knn.lsh.MinHashUDTF"""
        return self._generate(get_binding("minhash"), to_columns(exprs))

    def amplify(self, *exprs: ColumnOrName) -> DataFrame:
        """
        @see hivemall.ftvec.amplify.AmplifierUDTF

        The first argument is the amplification factor; the output columns are
        named after the remaining arguments.
        """
        output_columns = [column_name(e) for e in exprs[1:]]
        return self._generate(get_binding("amplify"), to_columns(exprs), output_columns)

    def rand_amplify(self, *exprs: ColumnOrName) -> DataFrame:
        """
        @see hivemall.ftvec.amplify.RandomAmplifierUDTF

        The first two arguments are the amplification factor and the buffer
        size; the output columns are named after the remaining arguments.
        """
        output_columns = [column_name(e) for e in exprs[2:]]
        return self._generate(get_binding("rand_amplify"), to_columns(exprs), output_columns)

    def part_amplify(self, xtimes: int) -> DataFrame:
        """Amplify and shuffle data inside partitions."""
        rdd = self._df.rdd.mapPartitions(partial(amplify_partition, xtimes=xtimes),
                                         preservesPartitioning=True)
        return self._spark.createDataFrame(rdd, self._df.schema)

    def lr_datagen(self, options: Union[str, Column]) -> DataFrame:
        """@see hivemall.dataset.LogisticRegressionDataGeneratorUDTF"""
        option_col = F.lit(options) if isinstance(options, str) else options
        return self._generate(get_binding("lr_datagen"), [option_col])

    def explode_array(self, input: ColumnOrName) -> DataFrame:
        """Split an array of feature strings into one ``feature`` row per element."""
        return self._df.select("*", F.explode(to_column(input)).alias("feature"))

    def as_(self, *col_names: str) -> DataFrame:
        """Returns a new DataFrame with columns renamed."""
        return self._df.toDF(*col_names)


def hivemall(df: DataFrame, config: Optional[HivemallConfig] = None) -> HivemallOps:
    return HivemallOps(df, config=config)


def install_accessor(name: str = "hivemall") -> None:
    """
    Expose ``HivemallOps`` as a DataFrame property, e.g. ``df.hivemall.train_pa1(...)``.
    """
    if hasattr(DataFrame, name) and not isinstance(getattr(DataFrame, name), property):
        raise AttributeError(f"DataFrame already defines '{name}'")
    setattr(DataFrame, name, property(lambda df: HivemallOps(df)))
    logger.debug(f"Installed HivemallOps as DataFrame.{name}")


TRAINING_METHODS: List[str] = sorted(
    name for name in vars(HivemallOps) if name.startswith("train_"))
