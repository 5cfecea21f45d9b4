#!/usr/bin/env python3
"""
Naming helpers for generated Rust bindings.

This module turns the engine's API names into identifiers usable in
generated code:

- `to_module_name`: PascalCase class names (``Node2D``, ``HTTPRequest``)
  to snake_case module names (``node_2d``, ``http_request``)
- `safe_ident`: escape identifiers colliding with Rust keywords
- `make_enum_name` / `make_enumerator_name`: hooks for enum renaming

All functions are pure and total over any string input.
"""

from __future__ import annotations

from typing import FrozenSet, List, Optional, Sequence, Tuple


# --------------------------
# Case conversion
# --------------------------

# Literal fixes applied after the general conversion, in order.
# Each pattern replaces its first occurrence only.
#   VisualShaderNodeVec3Uniform -> visual_shader_node_vec_3uniform -> ..._vec3_uniform
MODULE_NAME_CORRECTIONS: Sequence[Tuple[str, str]] = (
    ("_vec_3", "_vec3_"),
    ("gd_native", "gdnative"),
    ("gd_script", "gdscript"),
)

# Module names that would be clobbered by a glob import in generated code.
GLOB_IMPORT_CLASHES: FrozenSet[str] = frozenset({"gdnative"})


def _is_upper_or_digit(ch: Optional[str]) -> bool:
    """None is neither upper nor digit."""
    if ch is None:
        return False
    return "A" <= ch <= "Z" or "0" <= ch <= "9"


def _is_lower_or(ch: Optional[str], default: bool) -> bool:
    if ch is None:
        return default
    return "a" <= ch <= "z"


def _ascii_lower(ch: str) -> str:
    return ch.lower() if "A" <= ch <= "Z" else ch


def to_module_name(class_name: str) -> str:
    """
    Convert an engine class name to its snake_case module name.

    Underscores in the input are dropped first. A separator is inserted before
    a character when:
    - caps-to-lowercase: previous and current are upper/digit, the one before
      previous is not lowercase, and the next one is lowercase (``HTTPRequest`` -> ``http_request``),
      a leading acronym is never broken up (missing look-behind counts as lowercase)
    - lowercase-to-uppercase: previous is lowercase, current upper/digit
      (``Node2D`` -> ``node_2d``; digits count as uppercase)
    """
    chars = [ch for ch in class_name if ch != "_"]

    # 2-lookbehind: (previous-previous, previous)
    two_prev: Optional[str] = None
    one_prev: Optional[str] = None

    out: List[str] = []
    for i, current in enumerate(chars):
        nxt = chars[i + 1] if i + 1 < len(chars) else None

        caps_to_lowercase = (
            _is_upper_or_digit(one_prev)
            and _is_upper_or_digit(current)
            and _is_lower_or(nxt, False)
            and not _is_lower_or(two_prev, True)
        )
        lower_to_uppercase = _is_lower_or(one_prev, False) and _is_upper_or_digit(current)

        if caps_to_lowercase or lower_to_uppercase:
            out.append("_")
        out.append(_ascii_lower(current))

        two_prev, one_prev = one_prev, current

    result = "".join(out)
    for pattern, replacement in MODULE_NAME_CORRECTIONS:
        result = result.replace(pattern, replacement, 1)

    if result in GLOB_IMPORT_CLASHES:
        return f"{result}_"
    return result


# --------------------------
# Identifiers
# --------------------------

# https://doc.rust-lang.org/reference/keywords.html
RUST_KEYWORDS: FrozenSet[str] = frozenset({
    # Strict
    "as", "break", "const", "continue", "crate", "else", "enum", "extern", "false", "fn", "for", "if",
    "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return", "self", "Self",
    "static", "struct", "super", "trait", "true", "type", "unsafe", "use", "where", "while",
    # Strict, 2018+
    "async", "await", "dyn",
    # Reserved
    "abstract", "become", "box", "do", "final", "macro", "override", "priv", "typeof", "unsized",
    "virtual", "yield",
    # Reserved, 2018+
    "try",
})


def ident(name: str) -> str:
    return name


def safe_ident(name: str) -> str:
    """
    Return `name` with a trailing underscore if it is a Rust keyword, else unchanged.
    Exact, case-sensitive match (``Self`` is escaped, ``SELF`` is not).
    """
    if name in RUST_KEYWORDS:
        return f"{name}_"
    return ident(name)


safe_identifier = safe_ident


def make_enum_name(enum_name: str) -> str:
    # TODO drop the owning class name repeated inside enum names (CameraFeed.FeedDataType -> DataType)
    return ident(enum_name)


def make_enumerator_name(enumerator_name: str, enum_name: str) -> str:
    # TODO strip the enum-name prefix from enumerators (KEY_ESCAPE in Key -> ESCAPE)
    return ident(enumerator_name)


__all__ = [
    "MODULE_NAME_CORRECTIONS",
    "GLOB_IMPORT_CLASHES",
    "RUST_KEYWORDS",
    "to_module_name",
    "ident",
    "safe_ident",
    "safe_identifier",
    "make_enum_name",
    "make_enumerator_name",
]
