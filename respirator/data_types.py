from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class RespType(type):
    def __repr__(self) -> str:
        return self.__name__.lower()


@dataclass(frozen=True)
class SimpleString(metaclass=RespType):
    value: bytes

    def dump(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class Integer(metaclass=RespType):
    value: int

    def dump(self) -> int:
        return self.value


@dataclass(frozen=True)
class Error(metaclass=RespType):
    value: bytes

    def dump(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class BulkString(metaclass=RespType):
    value: bytes | None = None

    def dump(self) -> bytes | None:
        return self.value


@dataclass(frozen=True)
class Array(metaclass=RespType):
    elements: tuple[Value, ...] | None = None

    def __len__(self) -> int:
        return len(self.elements) if self.elements else 0

    def __getitem__(self, index: int) -> Value:
        if self.elements is None:
            raise IndexError("absent array has no elements")
        return self.elements[index]

    def dump(self) -> list[Any] | None:
        if self.elements is None:
            return None
        return [element.dump() for element in self.elements]


Value = SimpleString | Integer | Error | BulkString | Array
