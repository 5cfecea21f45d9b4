#!/usr/bin/env python3
"""
Data models for the Godot Rust binding code generator.

This module provides immutable, hashable data structures to describe:
- Resolved Rust types (a closed set of four kinds, see `RustTyKind`)
- Enum descriptors as found in the engine's API dump
- Enum definitions produced from those descriptors, including the
  runtime value type (`EnumOrdinal`) with bitfield combination

The models are designed to be consumed by:
- The type mapper (`type_mapping.py`) and enum builder (`enums.py`)
- The emitters/templates (Jinja2) that render Rust source text
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

# Enumerator ordinals are stored as i32 (default C++ enum repr).
I32_MIN = -(2 ** 31)
I32_MAX = 2 ** 31 - 1

# Name of the zero constant emitted for bitfields.
UNSET_NAME = "UNSET"


# --------------------------
# Rust type model
# --------------------------

class RustTyKind(Enum):
    BUILTIN_IDENT = auto()
    BUILTIN_GENERIC = auto()
    ENGINE_ENUM = auto()
    ENGINE_CLASS = auto()


@dataclass(frozen=True)
class RustTy:
    """
    A resolved Rust type, tagged by `kind`.

    Field usage per kind:
    - BUILTIN_IDENT: `name` is the Rust identifier (``i64``, ``GodotString``)
    - BUILTIN_GENERIC: `name` is the container (``TypedArray``), `type_args` its parameters
    - ENGINE_ENUM: `module` is the enum's module (class module or ``global``), `name` the enum
    - ENGINE_CLASS: `name` is the handle (``Gd``), `type_args` holds the class identifier
    """
    kind: RustTyKind
    name: str
    type_args: Tuple[RustTy, ...] = ()
    module: Optional[str] = None

    @staticmethod
    def builtin_ident(name: str) -> RustTy:
        return RustTy(kind=RustTyKind.BUILTIN_IDENT, name=name)

    @staticmethod
    def builtin_generic(name: str, type_args: Sequence[RustTy]) -> RustTy:
        return RustTy(kind=RustTyKind.BUILTIN_GENERIC, name=name, type_args=tuple(type_args))

    @staticmethod
    def engine_enum(module: str, name: str) -> RustTy:
        return RustTy(kind=RustTyKind.ENGINE_ENUM, name=name, module=module)

    @staticmethod
    def engine_class(class_name: str, handle: str = "Gd") -> RustTy:
        return RustTy(
            kind=RustTyKind.ENGINE_CLASS,
            name=handle,
            type_args=(RustTy.builtin_ident(class_name),),
        )

    @property
    def path(self) -> str:
        """
        Path for engine enums (``node::ProcessMode``, ``global::Error``); the bare name otherwise.
        """
        if self.kind == RustTyKind.ENGINE_ENUM and self.module:
            return f"{self.module}::{self.name}"
        return self.name

    @property
    def class_name(self) -> Optional[str]:
        """
        Engine class wrapped by an ENGINE_CLASS handle.
        """
        if self.kind == RustTyKind.ENGINE_CLASS and self.type_args:
            return self.type_args[0].name
        return None

    def to_rust(self) -> str:
        """
        Rust spelling of this type, e.g. 'TypedArray<Gd<Node>>'.
        """
        if self.type_args:
            args = ", ".join(a.to_rust() for a in self.type_args)
            return f"{self.path}<{args}>"
        return self.path

    def __str__(self) -> str:
        return self.to_rust()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.name,
            "name": self.name,
            "module": self.module,
            "type_args": [a.to_dict() for a in self.type_args],
            "rust": self.to_rust(),
        }


# --------------------------
# Enum models
# --------------------------

def _check_i32(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what}: ordinal must be an integer, got {value!r}")
    if not I32_MIN <= value <= I32_MAX:
        raise ValueError(f"{what}: ordinal {value} does not fit in 32-bit storage")
    return value


@dataclass(frozen=True)
class Enumerator:
    name: str
    value: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Enumerator name must not be empty")
        _check_i32(self.value, f"enumerator {self.name}")


@dataclass(frozen=True)
class EnumDescriptor:
    """
    An enum or bitfield as declared by the engine's API.
    Ordinals are not required to be unique (aliases are legal).
    """
    name: str
    values: Tuple[Enumerator, ...] = ()
    is_bitfield: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Enum name must not be empty")
        object.__setattr__(self, "values", tuple(self.values))
        if self.is_bitfield and any(v.name == UNSET_NAME for v in self.values):
            raise ValueError(f"Bitfield {self.name} declares {UNSET_NAME}, which is reserved for the zero constant")

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> EnumDescriptor:
        """
        Build from the API dump shape:
          {"name": "Error", "is_bitfield": false, "values": [{"name": "OK", "value": 0}, ...]}
        """
        try:
            name = data["name"]
            raw_values = data.get("values", [])
            values = tuple(Enumerator(name=v["name"], value=v["value"]) for v in raw_values)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed enum entry {data!r}: {e}") from e
        return EnumDescriptor(name=name, values=values, is_bitfield=bool(data.get("is_bitfield", False)))


@dataclass(frozen=True)
class EnumOrdinal:
    """
    Value of a generated enum type: a transparent wrapper over an i32 ordinal.

    The public `ord` accessor is widened to a plain (64-bit) integer. For bitfields,
    `a | b` yields a value of the same type holding the bitwise OR of both ordinals.
    """
    enum_name: str
    ord_i32: int
    is_bitfield: bool = False

    def __post_init__(self) -> None:
        _check_i32(self.ord_i32, f"enum {self.enum_name}")

    @property
    def ord(self) -> int:
        return int(self.ord_i32)

    def __or__(self, other: object) -> EnumOrdinal:
        if not isinstance(other, EnumOrdinal):
            return NotImplemented
        if not (self.is_bitfield and other.is_bitfield):
            raise TypeError(f"'|' is only defined for bitfields, not enum {self.enum_name}")
        if other.enum_name != self.enum_name:
            raise TypeError(f"Cannot combine {self.enum_name} with {other.enum_name}")
        return EnumOrdinal(self.enum_name, self.ord_i32 | other.ord_i32, is_bitfield=True)


@dataclass(frozen=True)
class EnumDefinition:
    """
    Generated enum/bitfield type: its name, ordered named constants, and for
    bitfields the `UNSET` (zero) constant.
    """
    name: str
    enumerators: Tuple[Tuple[str, EnumOrdinal], ...] = ()
    is_bitfield: bool = False
    unset: Optional[EnumOrdinal] = None
    storage: str = "i32"
    public_ord: str = "i64"
    _by_name: Dict[str, EnumOrdinal] = field(default_factory=dict, init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "enumerators", tuple(self.enumerators))
        lookup = dict(self.enumerators)
        if self.unset is not None:
            if UNSET_NAME in lookup:
                raise ValueError(
                    f"Bitfield {self.name} declares {UNSET_NAME}, which is reserved for the zero constant"
                )
            lookup[UNSET_NAME] = self.unset
        object.__setattr__(self, "_by_name", lookup)

    @property
    def names(self) -> List[str]:
        return [n for n, _ in self.enumerators]

    @property
    def ordinals(self) -> Dict[str, int]:
        return {n: v.ord for n, v in self.enumerators}

    def constant(self, name: str) -> EnumOrdinal:
        """
        Look up a named constant (including ``UNSET`` for bitfields).
        Raises KeyError if absent.
        """
        return self._by_name[name]

    def __getitem__(self, name: str) -> EnumOrdinal:
        return self.constant(name)

    def __iter__(self) -> Iterator[Tuple[str, EnumOrdinal]]:
        return iter(self.enumerators)

    def __len__(self) -> int:
        return len(self.enumerators)

    def combine(self, a: EnumOrdinal, b: EnumOrdinal) -> EnumOrdinal:
        return a | b

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "is_bitfield": self.is_bitfield,
            "storage": self.storage,
            "public_ord": self.public_ord,
            "enumerators": [{"name": n, "value": v.ord} for n, v in self.enumerators],
            "unset": self.unset.ord if self.unset is not None else None,
        }


__all__ = [
    "I32_MIN",
    "I32_MAX",
    "UNSET_NAME",
    "RustTyKind",
    "RustTy",
    "Enumerator",
    "EnumDescriptor",
    "EnumOrdinal",
    "EnumDefinition",
]
