"""
Grouped aggregation with Hivemall UDAFs.

``GroupedDataEx`` mirrors Spark's ``GroupedData`` and adds the Hivemall
aggregate functions. Anything it does not define itself is delegated to the
engine's grouped data.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F
from pyspark.sql.types import ArrayType, DataType, FloatType, IntegerType, StringType

from .catalog import FunctionCatalog, default_catalog
from .columns import ColumnOrName, to_columns
from .exceptions import AnalysisError
from .registry import get_binding

logger = logging.getLogger(__name__)

# agg() names that map to a Hivemall UDAF
HIVEMALL_AGG_FUNCTIONS = ("voted_avg", "weight_voted_avg")

_AGG_ALIASES = {
    "avg": "avg",
    "average": "avg",
    "mean": "avg",
    "stddev": "stddev",
    "std": "stddev",
    "count": "count",
    "size": "count",
}


class GroupType(str, Enum):
    GROUPBY = "groupby"
    ROLLUP = "rollup"
    CUBE = "cube"
    PIVOT = "pivot"


def normalize_agg_name(name: str) -> str:
    """Map aggregate aliases onto the names known to the engine."""
    name = name.lower()
    return _AGG_ALIASES.get(name, name)


class GroupedDataEx:

    _OWN_ATTRS = frozenset(['df', 'grouping_cols', 'group_type', 'pivot_col', 'pivot_values', 'catalog'])

    def __init__(self,
                 df: DataFrame,
                 grouping_cols: Sequence[ColumnOrName],
                 group_type: GroupType = GroupType.GROUPBY,
                 pivot_col: Optional[str] = None,
                 pivot_values: Optional[List[Any]] = None,
                 catalog: Optional[FunctionCatalog] = None):
        self.df = df
        self.grouping_cols = list(grouping_cols)
        self.group_type = GroupType(group_type)
        self.pivot_col = pivot_col
        self.pivot_values = pivot_values
        self.catalog = catalog or default_catalog()

        if self.group_type == GroupType.PIVOT and pivot_col is None:
            raise ValueError("pivot_col is required for a pivot grouping")

    def __getattr__(self, name: str):
        # Only reached for attributes not defined on this class
        if name.startswith('_') or name in self._OWN_ATTRS:
            raise AttributeError(name)
        return getattr(self._grouped(), name)

    def pivot(self, pivot_col: str, values: Optional[List[Any]] = None) -> 'GroupedDataEx':
        return GroupedDataEx(self.df, self.grouping_cols, GroupType.PIVOT,
                             pivot_col=pivot_col, pivot_values=values, catalog=self.catalog)

    def _grouped(self):
        cols = to_columns(self.grouping_cols)
        if self.group_type == GroupType.ROLLUP:
            return self.df.rollup(*cols)
        if self.group_type == GroupType.CUBE:
            return self.df.cube(*cols)
        grouped = self.df.groupBy(*cols)
        if self.group_type == GroupType.PIVOT:
            if self.pivot_values is None:
                return grouped.pivot(self.pivot_col)
            return grouped.pivot(self.pivot_col, self.pivot_values)
        return grouped

    def _to_df(self, agg_exprs: List[Column]) -> DataFrame:
        return self._grouped().agg(*agg_exprs)

    def _hivemall_udaf(self, name: str, args: Sequence[Column]) -> Column:
        binding = get_binding(name)
        self.catalog.ensure_registered(self.df.sparkSession, binding)
        return F.call_function(binding.sql_name, *args)

    def _str_to_expr(self, col_name: str, func: str) -> Column:
        if func in HIVEMALL_AGG_FUNCTIONS:
            return self._hivemall_udaf(func, [self.df[col_name]])

        name = normalize_agg_name(func)
        if name == "count":
            # count(*) becomes count(1)
            if col_name == "*":
                return F.count(F.lit(1))
            return F.count(self.df[col_name])
        return F.call_function(name, self.df[col_name])

    def agg(self, *exprs: Union[Column, Dict[str, str]]) -> DataFrame:
        """
        Compute aggregates and return the result as a DataFrame.

        Accepts either a single ``{column: function}`` dict, where Hivemall's
        ``voted_avg`` and ``weight_voted_avg`` are recognised next to the
        engine's own functions, or aggregate Columns.
        """
        if not exprs:
            raise ValueError("exprs should not be empty")

        if len(exprs) == 1 and isinstance(exprs[0], dict):
            agg_exprs = []
            for col_name, func in exprs[0].items():
                expr = self._str_to_expr(col_name, func)
                agg_exprs.append(expr.alias(f"{normalize_agg_name(func)}({col_name})"))
            return self._to_df(agg_exprs)

        return self._to_df(list(exprs))

    def _check_type(self, col_name: str, expected: DataType) -> None:
        data_type = self._resolve_type(col_name)
        # Nullability of array elements is not part of the contract
        if data_type.simpleString() != expected.simpleString():
            raise AnalysisError(
                f'"{col_name}" must be {expected.simpleString()}, '
                f'however it is {data_type.simpleString()}')

    def _resolve_type(self, col_name: str) -> DataType:
        try:
            return self.df.schema[col_name].dataType
        except KeyError:
            raise AnalysisError(
                f'Cannot resolve column name "{col_name}" among ({", ".join(self.df.columns)})'
            ) from None

    def _udaf(self, name: str, *col_names: str) -> DataFrame:
        for col_name in col_names:
            self._resolve_type(col_name)
        udaf = self._hivemall_udaf(name, [self.df[c] for c in col_names])
        return self._to_df([udaf.alias(f"{name}({', '.join(col_names)})")])

    def argmin_kld(self, weight: str, conv: str) -> DataFrame:
        """@see hivemall.ensemble.ArgminKLDistanceUDAF"""
        return self._udaf("argmin_kld", weight, conv)

    def max_label(self, score: str, label: str) -> DataFrame:
        """@see hivemall.ensemble.MaxValueLabelUDAF"""
        self._check_type(label, StringType())
        return self._udaf("max_label", score, label)

    def maxrow(self, score: str, label: str) -> DataFrame:
        """@see hivemall.ensemble.MaxRowUDAF"""
        self._check_type(label, StringType())
        return self._udaf("maxrow", score, label)

    def f1score(self, predict: str, target: str) -> DataFrame:
        """@see hivemall.evaluation.FMeasureUDAF"""
        self._check_type(target, ArrayType(IntegerType()))
        self._check_type(predict, ArrayType(IntegerType()))
        return self._udaf("f1score", target, predict)

    def mae(self, predict: str, target: str) -> DataFrame:
        """@see hivemall.evaluation.MeanAbsoluteErrorUDAF"""
        self._check_type(predict, FloatType())
        self._check_type(target, FloatType())
        return self._udaf("mae", predict, target)

    def mse(self, predict: str, target: str) -> DataFrame:
        """@see hivemall.evaluation.MeanSquaredErrorUDAF"""
        self._check_type(predict, FloatType())
        self._check_type(target, FloatType())
        return self._udaf("mse", predict, target)

    def rmse(self, predict: str, target: str) -> DataFrame:
        """@see hivemall.evaluation.RootMeanSquaredErrorUDAF"""
        self._check_type(predict, FloatType())
        self._check_type(target, FloatType())
        return self._udaf("rmse", predict, target)
