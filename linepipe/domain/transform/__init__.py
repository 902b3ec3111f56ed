from .integers import INTEGER_TYPES, IntegerErrorKind, IntegerParseError, IntegerType, I32, I64, U32, U64
from .transforms import TRANSFORMS, LineTransform, apply_transform, get_transform, integer_transform

__all__ = [
    "INTEGER_TYPES",
    "IntegerErrorKind",
    "IntegerParseError",
    "IntegerType",
    "I32",
    "I64",
    "U32",
    "U64",
    "TRANSFORMS",
    "LineTransform",
    "apply_transform",
    "get_transform",
    "integer_transform",
]
