#!/usr/bin/env python3
"""
Type mapping from the engine's API type names to Rust binding types.

Type names in the API dump are plain strings, optionally qualified:

    "int", "String", "Vector2"          builtin types
    "enum::Error"                       global enum
    "enum::Node.ProcessMode"            class-local enum
    "bitfield::Control.SizeFlags"       class-local bitfield
    "PackedInt32Array"                  packed array
    "typedarray::Node"                  typed array of an element type
    "Node"                              engine class

Each is classified into one of the four `RustTyKind`s. Resolution is total:
anything unrecognized is assumed to already be a valid Rust type name.

Typical usage:

    from .context import Context
    from .type_mapping import TypeMapper

    mapper = TypeMapper.from_class_names(["Node", "Resource"])
    mapper.map_type("typedarray::Node").to_rust()   # 'TypedArray<Gd<Node>>'

Design notes:
- The override table is checked before qualifier parsing. An override for a
  qualified name (``enum::Vector3.Axis``) therefore wins over the generic rule.
- The class registry is injected; the mapper holds no mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Mapping, Optional

from .context import ClassRegistry, Context
from .models import RustTy
from .naming import ident, make_enum_name, to_module_name

ENUM_PREFIX = "enum::"
BITFIELD_PREFIX = "bitfield::"
TYPED_ARRAY_PREFIX = "typedarray::"
PACKED_PREFIX = "Packed"
PACKED_SUFFIX = "Array"

# Names the generic rules would get wrong, or enums modelled as builtins.
HARDCODED_RUST_TYPES: Mapping[str, str] = {
    "int": "i64",
    "float": "f64",
    "String": "GodotString",
    "enum::Variant.Type": "VariantType",
    "enum::Variant.Operator": "VariantOperator",
    "enum::Vector3.Axis": "Vector3Axis",
}


# --------------------------
# Configuration
# --------------------------

@dataclass
class MappingConfig:
    """
    Settings for the type mapper.
    """
    # Exact raw name -> Rust identifier, checked first
    overrides: Dict[str, str] = field(default_factory=lambda: dict(HARDCODED_RUST_TYPES))
    # Smart pointer wrapping engine objects
    class_handle: str = "Gd"
    # Generic container for typedarray::T
    typed_array: str = "TypedArray"
    # Module holding enums not owned by a class
    global_enum_module: str = "global"

    def with_override(self, raw: str, rust: str) -> "MappingConfig":
        """
        Copy of this config with one more override; this config is left unchanged.
        """
        return replace(self, overrides={**self.overrides, raw: rust})


# --------------------------
# Mapper
# --------------------------

class TypeMapper:
    """
    Resolve API type names against an injected class registry.

    Build with:
      - TypeMapper(registry, config)
      - TypeMapper.from_class_names(names, config)
    """

    def __init__(self, registry: ClassRegistry, config: Optional[MappingConfig] = None) -> None:
        self.registry = registry
        self.config = config or MappingConfig()

    @staticmethod
    def from_class_names(names: Iterable[str], config: Optional[MappingConfig] = None) -> "TypeMapper":
        return TypeMapper(Context(names), config=config)

    # ---- Public API ----

    def map_type(self, ty: str) -> RustTy:
        """
        Resolve a raw type name. First match wins:
        override, enum/bitfield, packed array, typed array, engine class, unchanged.
        """
        hardcoded = self.config.overrides.get(ty)
        if hardcoded is not None:
            return RustTy.builtin_ident(ident(hardcoded))

        qualified_enum = _strip_prefix(ty, ENUM_PREFIX)
        if qualified_enum is None:
            qualified_enum = _strip_prefix(ty, BITFIELD_PREFIX)
        if qualified_enum is not None:
            return self._map_enum(qualified_enum)

        packed = _strip_prefix(ty, PACKED_PREFIX)
        if packed is not None:
            # Don't trigger on PackedScene
            if packed.endswith(PACKED_SUFFIX):
                return RustTy.builtin_ident(ident(packed))
        else:
            elem = _strip_prefix(ty, TYPED_ARRAY_PREFIX)
            if elem is not None:
                return self._map_typed_array(elem)

        if self.registry.is_engine_class(ty):
            return RustTy.engine_class(ident(ty), handle=self.config.class_handle)

        return RustTy.builtin_ident(ident(ty))

    # ---- Rules ----

    def _map_enum(self, qualified_enum: str) -> RustTy:
        cls, sep, enum_ = qualified_enum.partition(".")
        if sep:
            return RustTy.engine_enum(ident(to_module_name(cls)), make_enum_name(enum_))
        return RustTy.engine_enum(self.config.global_enum_module, make_enum_name(qualified_enum))

    def _map_typed_array(self, elem: str) -> RustTy:
        packed = _strip_prefix(elem, PACKED_PREFIX)
        if packed is not None:
            return RustTy.builtin_ident(ident(packed))
        return RustTy.builtin_generic(self.config.typed_array, [self.map_type(elem)])


# --------------------------
# Helpers
# --------------------------

def _strip_prefix(s: str, prefix: str) -> Optional[str]:
    """
    Remainder of `s` after `prefix`, or None if `s` does not start with it.
    """
    if s.startswith(prefix):
        return s[len(prefix):]
    return None


def to_hardcoded_rust_type(ty: str) -> Optional[str]:
    return HARDCODED_RUST_TYPES.get(ty)


def to_rust_type(ty: str, ctx: ClassRegistry) -> RustTy:
    """
    Resolve `ty` with the default configuration.
    """
    # TODO cache resolved types per registry once a generation run resolves every method signature
    return TypeMapper(ctx).map_type(ty)


resolve_type = to_rust_type


__all__ = [
    "ENUM_PREFIX",
    "BITFIELD_PREFIX",
    "TYPED_ARRAY_PREFIX",
    "HARDCODED_RUST_TYPES",
    "MappingConfig",
    "TypeMapper",
    "to_hardcoded_rust_type",
    "to_rust_type",
    "resolve_type",
]
