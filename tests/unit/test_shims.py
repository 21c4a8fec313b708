"""
Unit tests for the typed UDF signatures.
"""

import pytest
from unittest.mock import MagicMock

from pyspark.sql.types import ArrayType, DoubleType, IntegerType, StringType

from hivemall_spark.exceptions import UDFArgumentError
from hivemall_spark.registry import REGISTRY
from hivemall_spark.shims import SHIMS, TypeShim, get_shim


class TestTypeShim:

    def test_exact_arity(self):
        shim = TypeShim("f", (1,), StringType())
        shim.check_arity(1)
        with pytest.raises(UDFArgumentError, match=r"f\(\) takes exactly 1 argument \(0 given\)"):
            shim.check_arity(0)

    def test_plural_arguments(self):
        shim = TypeShim("g", (2,), StringType())
        with pytest.raises(UDFArgumentError, match="takes exactly 2 arguments"):
            shim.check_arity(3)

    def test_alternative_arities(self):
        shim = TypeShim("h", (2, 4), StringType())
        shim.check_arity(4)
        with pytest.raises(UDFArgumentError, match=r"h\(\) takes 2 or 4 arguments \(1 given\)"):
            shim.check_arity(1)

    def test_apply_casts_arguments_and_result(self):
        shim = TypeShim("add_feature_index", (1,), ArrayType(StringType()), (ArrayType(DoubleType()),))
        arg, call = MagicMock(), MagicMock()

        result = shim.apply(call, [arg])

        arg.cast.assert_called_once_with(ArrayType(DoubleType()))
        call.assert_called_once_with(arg.cast.return_value)
        call.return_value.cast.assert_called_once_with(ArrayType(StringType()))
        assert result is call.return_value.cast.return_value

    def test_apply_without_argument_types(self):
        shim = TypeShim("minhashes", (2, 4), ArrayType(IntegerType()))
        args = [MagicMock(), MagicMock()]
        call = MagicMock()

        shim.apply(call, args)

        call.assert_called_once_with(*args)
        for arg in args:
            arg.cast.assert_not_called()

    def test_apply_checks_arity_before_calling(self):
        call = MagicMock()
        with pytest.raises(UDFArgumentError):
            get_shim("normalize").apply(call, [])
        call.assert_not_called()


class TestShimTable:

    def test_every_shim_is_a_registered_function(self):
        assert set(SHIMS) <= set(REGISTRY)

    def test_get_shim(self):
        assert get_shim("extract_weight").name == "extract_weight"
        assert get_shim("cosine_sim") is None

    def test_rowid_takes_no_arguments(self):
        get_shim("rowid").check_arity(0)
