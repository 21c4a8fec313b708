"""
Explicit type signatures for Hivemall generic UDF wrappers.

Spark's Hive bridge infers UDF types through reflection and gets some of them
wrong (e.g. ``List`` return types, SPARK-6747). The wrappers in the Hivemall jar
report their types through object inspectors instead; this module declares the
same signatures on the Spark side so that the call sites carry explicit types.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from pyspark.sql import Column
from pyspark.sql.types import (
    ArrayType,
    DataType,
    DoubleType,
    FloatType,
    IntegerType,
    MapType,
    StringType,
)

from .exceptions import UDFArgumentError


@dataclass(frozen=True)
class TypeShim:
    name: str
    arities: Tuple[int, ...]
    return_type: DataType
    argument_types: Optional[Tuple[DataType, ...]] = None

    def check_arity(self, num_args: int) -> None:
        if num_args in self.arities:
            return
        if len(self.arities) == 1:
            expected = self.arities[0]
            plural = "argument" if expected == 1 else "arguments"
            raise UDFArgumentError(
                f"{self.name}() takes exactly {expected} {plural} ({num_args} given)")
        choices = " or ".join(str(n) for n in self.arities)
        raise UDFArgumentError(f"{self.name}() takes {choices} arguments ({num_args} given)")

    def apply(self, call: Callable[..., Column], args: Sequence[Column]) -> Column:
        """
        Invoke ``call`` with ``args`` under this signature.

        Arguments with a declared type are cast to it and the result is cast to
        the declared return type.
        """
        args = list(args)
        self.check_arity(len(args))
        if self.argument_types is not None:
            args = [arg.cast(data_type) for arg, data_type in zip(args, self.argument_types)]
        return call(*args).cast(self.return_type)


STRING_ARRAY = ArrayType(StringType())

SHIMS: Dict[str, TypeShim] = {shim.name: shim for shim in [
    TypeShim("add_bias", (1,), STRING_ARRAY, (STRING_ARRAY,)),
    TypeShim("extract_feature", (1,), StringType(), (StringType(),)),
    TypeShim("extract_weight", (1,), FloatType(), (StringType(),)),
    TypeShim("add_feature_index", (1,), STRING_ARRAY, (ArrayType(DoubleType()),)),
    TypeShim("sort_by_feature", (1,), MapType(IntegerType(), FloatType())),
    TypeShim("normalize", (1,), STRING_ARRAY, (STRING_ARRAY,)),
    TypeShim("minhashes", (2, 4), ArrayType(IntegerType())),
    TypeShim("rowid", (0,), StringType(), ()),
]}


def get_shim(name: str) -> Optional[TypeShim]:
    return SHIMS.get(name)
