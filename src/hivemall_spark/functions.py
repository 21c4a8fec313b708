"""
Hivemall scalar functions as Spark Column expressions.

The functions register their Hive implementation in the active SparkSession on
first use, so a session has to exist before they are called.
"""

import logging
from typing import Optional

from pyspark.sql import Column, SparkSession
from pyspark.sql import functions as F

from .catalog import default_catalog
from .columns import ColumnOrName, to_columns
from .exceptions import HivemallError
from .registry import get_binding
from .shims import get_shim

logger = logging.getLogger(__name__)


def _active_session() -> SparkSession:
    spark = SparkSession.getActiveSession()
    if spark is None:
        raise HivemallError("No active SparkSession; create one before using Hivemall functions")
    return spark


def _invoke(name: str, *exprs: ColumnOrName, alias: Optional[str] = None) -> Column:
    binding = get_binding(name)
    default_catalog().ensure_registered(_active_session(), binding)

    cols = to_columns(exprs)
    call = lambda *args: F.call_function(binding.sql_name, *args)  # noqa: E731
    shim = get_shim(name)
    column = shim.apply(call, cols) if shim is not None else call(*cols)
    return column.alias(alias) if alias else column


# misc

def hivemall_version() -> Column:
    """@see hivemall.HivemallVersionUDF"""
    return _invoke("hivemall_version")


# knn.distance

def cosine_sim(*exprs: ColumnOrName) -> Column:
    """@see hivemall.knn.distance.CosineSimilarityUDF"""
    return _invoke("cosine_sim", *exprs)


def hamming_distance(*exprs: ColumnOrName) -> Column:
    """@see hivemall.knn.distance.HammingDistanceUDF"""
    return _invoke("hamming_distance", *exprs)


def jaccard(*exprs: ColumnOrName) -> Column:
    """@see hivemall.knn.distance.JaccardIndexUDF"""
    return _invoke("jaccard", *exprs)


def popcnt(*exprs: ColumnOrName) -> Column:
    """@see hivemall.knn.distance.PopcountUDF"""
    return _invoke("popcnt", *exprs)


def kld(*exprs: ColumnOrName) -> Column:
    """@see hivemall.knn.distance.KLDivergenceUDF"""
    return _invoke("kld", *exprs)


# knn.lsh

def bbit_minhash(*exprs: ColumnOrName) -> Column:
    """@see hivemall.knn.lsh.bBitMinHashUDF"""
    return _invoke("bbit_minhash", *exprs)


def minhashes(*exprs: ColumnOrName) -> Column:
    """@see hivemall.knn.lsh.MinHashesUDF"""
    return _invoke("minhashes", *exprs)


# ftvec

def add_bias(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.AddBiasUDF"""
    return _invoke("add_bias", *exprs)


def extract_feature(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.ExtractFeatureUDF"""
    return _invoke("extract_feature", *exprs, alias="feature")


def extract_weight(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.ExtractWeightUDF"""
    return _invoke("extract_weight", *exprs, alias="value")


def add_feature_index(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.AddFeatureIndexUDF"""
    return _invoke("add_feature_index", *exprs)


def sort_by_feature(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.SortByFeatureUDF"""
    return _invoke("sort_by_feature", *exprs)


# ftvec.hashing

def mhash(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.hashing.MurmurHash3UDF"""
    return _invoke("mhash", *exprs)


def sha1(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.hashing.Sha1UDF"""
    return _invoke("sha1", *exprs)


# ftvec.scaling

def rescale(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.scaling.RescaleUDF"""
    return _invoke("rescale", *exprs)


def zscore(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.scaling.ZScoreUDF"""
    return _invoke("zscore", *exprs)


def normalize(*exprs: ColumnOrName) -> Column:
    """@see hivemall.ftvec.scaling.L2NormalizationUDF"""
    return _invoke("normalize", *exprs)


# tools

def rowid() -> Column:
    """@see hivemall.tools.mapred.RowIdUDF"""
    return _invoke("rowid", alias="rowid")


def sigmoid(*exprs: ColumnOrName) -> Column:
    """
    Computes 1 / (1 + exp(-x)) in the engine.

    hivemall.tools.math.SigmodUDF only accepts floating-point input through the
    Hive bridge, so the expression is built from Spark's own functions.
    """
    value = to_columns(exprs[:1])[0]
    return F.lit(1.0) / (F.lit(1.0) + F.exp(-value))
