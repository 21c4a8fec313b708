import re
from typing import List, Union

from pyspark.sql import Column
from pyspark.sql import functions as F

ColumnOrName = Union[Column, str]

_CONNECT_REPR = re.compile(r"Column<'(.*)'>", re.DOTALL)


def to_column(col: ColumnOrName) -> Column:
    """Column names become column references and plain numbers become literals."""
    if isinstance(col, str):
        return F.col(col)
    if isinstance(col, (bool, int, float)):
        return F.lit(col)
    return col


def to_columns(cols) -> List[Column]:
    return [to_column(c) for c in cols]


def column_name(col: ColumnOrName) -> str:
    """
    Name the engine would give ``col`` in an output schema.

    Aliased expressions are named after their alias; other expressions after
    their pretty-printed form.
    """
    if isinstance(col, str):
        return col
    jc = getattr(col, "_jc", None)
    if jc is not None:
        expr = jc.expr()
        if expr.getClass().getSimpleName() == "Alias":
            return expr.name()
        return jc.toString()
    # Spark Connect keeps the alias names on the expression
    aliases = getattr(getattr(col, "_expr", None), "_alias", None)
    if aliases and len(aliases) == 1:
        return aliases[0]
    text = str(col)
    match = _CONNECT_REPR.fullmatch(text)
    return match.group(1) if match else text
