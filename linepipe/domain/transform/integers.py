from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")


class IntegerErrorKind(str, Enum):
    EMPTY = "cannot parse integer from empty string"
    INVALID_DIGIT = "invalid digit found in string"
    POS_OVERFLOW = "number too large to fit in target type"
    NEG_OVERFLOW = "number too small to fit in target type"


class IntegerParseError(ValueError):
    """
    Назначение:
        Ошибка разбора десятичного целого заданной разрядности.
    """

    def __init__(self, kind: IntegerErrorKind, text: str) -> None:
        super().__init__(kind.value)
        self.kind = kind
        self.text = text


@dataclass(frozen=True)
class IntegerType:
    """
    Назначение:
        Описание целочисленного типа фиксированной разрядности.

    Поля:
        name: короткое имя (u64, i32, ...)
        bits: разрядность
        signed: допускается ли знак минус
    """

    name: str
    bits: int
    signed: bool

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def parse(self, text: str) -> int:
        """
        Назначение:
            Строгий разбор: необязательный знак и только ASCII-цифры.
            Пробелы, подчёркивания и прочие формы, которые принимает int(), отвергаются.
        """
        if text == "":
            raise IntegerParseError(IntegerErrorKind.EMPTY, text)
        pattern = _SIGNED_RE if self.signed else _UNSIGNED_RE
        if pattern.fullmatch(text) is None:
            raise IntegerParseError(IntegerErrorKind.INVALID_DIGIT, text)
        value = int(text)
        if value > self.max_value:
            raise IntegerParseError(IntegerErrorKind.POS_OVERFLOW, text)
        if value < self.min_value:
            raise IntegerParseError(IntegerErrorKind.NEG_OVERFLOW, text)
        return value


U32 = IntegerType("u32", 32, signed=False)
U64 = IntegerType("u64", 64, signed=False)
I32 = IntegerType("i32", 32, signed=True)
I64 = IntegerType("i64", 64, signed=True)

INTEGER_TYPES: dict[str, IntegerType] = {t.name: t for t in (U64, U32, I64, I32)}


__all__ = [
    "IntegerErrorKind",
    "IntegerParseError",
    "IntegerType",
    "INTEGER_TYPES",
    "U32",
    "U64",
    "I32",
    "I64",
]
