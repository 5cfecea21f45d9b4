#!/usr/bin/env python3
"""
Enum and bitfield definitions.

Every engine enum becomes a transparent value type over an i32 ordinal with one
named constant per enumerator. Bitfields additionally get an ``UNSET`` (zero)
constant and ``|`` combination.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import UNSET_NAME, EnumDefinition, EnumDescriptor, EnumOrdinal
from .naming import make_enum_name, make_enumerator_name


def make_enum_definition(enum_: EnumDescriptor) -> EnumDefinition:
    enum_name = make_enum_name(enum_.name)

    enumerators: List[Tuple[str, EnumOrdinal]] = []
    for enumerator in enum_.values:
        name = make_enumerator_name(enumerator.name, enum_.name)
        enumerators.append((name, EnumOrdinal(enum_name, enumerator.value, is_bitfield=enum_.is_bitfield)))

    unset = EnumOrdinal(enum_name, 0, is_bitfield=True) if enum_.is_bitfield else None

    return EnumDefinition(
        name=enum_name,
        enumerators=tuple(enumerators),
        is_bitfield=enum_.is_bitfield,
        unset=unset,
    )


build_enum = make_enum_definition


def make_enum_definitions(enums: Iterable[EnumDescriptor]) -> List[EnumDefinition]:
    return [make_enum_definition(e) for e in enums]


__all__ = [
    "UNSET_NAME",
    "make_enum_definition",
    "make_enum_definitions",
    "build_enum",
]
