#!/usr/bin/env python3
"""
Godot Rust binding code generator: enums and type resolution.

This entrypoint wires together:
- Loading the engine's API dump (extension_api.json)
- Building enum/bitfield definitions for global and class-local enums
- Emitting (Jinja2-based) Rust sources for those enums
- Optionally resolving raw API type names to Rust types for inspection

Outputs:
- <output_dir>/global.rs          (module named after the global enum module)
- <output_dir>/<class_module>.rs   (for classes declaring enums)

Usage (example):
  python -m godot_codegen.generate_bindings \
    --api path/to/extension_api.json \
    --output-dir src/gen

  python -m godot_codegen.generate_bindings --api extension_api.json \
    --resolve "typedarray::Node" --resolve "enum::Node.ProcessMode" --dry-run
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, TextIO, Tuple

from .context import Context, api_section
from .emitters.rust_emitter import EmitterConfig, RustEmitter
from .enums import make_enum_definitions
from .models import EnumDefinition, EnumDescriptor
from .type_mapping import MappingConfig, TypeMapper
from .utils import TemplateRenderer, configure_logging

logger = logging.getLogger(__name__)


# --------------------------
# Helpers
# --------------------------

def load_api(path: Path) -> Dict[str, Any]:
    """
    Read the API dump. Raises OSError if unreadable, ValueError if not a JSON object.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object at top level")
    return data


def collect_enums(api: Mapping[str, Any]) -> Tuple[List[EnumDefinition], Dict[str, List[EnumDefinition]]]:
    """
    Build definitions for global enums and, per class, class-local enums.
    Raises ValueError on malformed sections or enum entries.
    """
    global_enums = make_enum_definitions(
        EnumDescriptor.from_dict(e) for e in api_section(api, "global_enums")
    )

    class_enums: Dict[str, List[EnumDefinition]] = {}
    for cls in api_section(api, "classes"):
        if not isinstance(cls, Mapping) or not cls.get("name"):
            logger.warning("Skipping class entry without a name: %r", cls)
            continue
        enums = cls.get("enums") or []
        if enums:
            class_enums[cls["name"]] = make_enum_definitions(EnumDescriptor.from_dict(e) for e in enums)
    return global_enums, class_enums


def print_resolved(mapper: TypeMapper, raw_types: Sequence[str], out: TextIO) -> None:
    for raw in raw_types:
        ty = mapper.map_type(raw)
        out.write(f"{raw} -> {ty.to_rust()} ({ty.kind.name})\n")


# --------------------------
# CLI
# --------------------------

def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate Rust enum bindings from a Godot API dump")

    p.add_argument(
        "--api",
        required=True,
        help="Path to the engine's API dump (extension_api.json).",
    )
    p.add_argument(
        "--output-dir",
        default="generated",
        help="Output directory for generated Rust sources.",
    )
    p.add_argument(
        "--templates-dir",
        default=None,
        help="Optional templates directory overriding the package templates.",
    )
    p.add_argument(
        "--resolve",
        action="append",
        default=[],
        help="Raw API type name to resolve and print (repeatable).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Build definitions and report without writing files.",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for DEBUG).",
    )
    p.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=0,
        help="Decrease verbosity (-q for WARNING, -qq for ERROR).",
    )
    p.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "critical", "error", "warning", "info", "debug"],
        default=None,
        help="Explicit log level (overrides -v/-q).",
    )
    p.add_argument(
        "--log-format",
        default="%(levelname)s: %(message)s",
        help="Logging format string.",
    )
    p.add_argument(
        "--log-file",
        default=None,
        help="Optional file to write logs to.",
    )

    return p.parse_args(argv)


def _resolve_log_level(ns: argparse.Namespace) -> int:
    if ns.log_level:
        return getattr(logging, ns.log_level.upper(), logging.INFO)
    if ns.verbose >= 1:
        return logging.DEBUG
    if ns.quiet >= 2:
        return logging.ERROR
    if ns.quiet == 1:
        return logging.WARNING
    return logging.INFO


# --------------------------
# Main
# --------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    ns = parse_args(argv)

    configure_logging(level=_resolve_log_level(ns), to_file=ns.log_file, fmt=ns.log_format)

    out_dir = Path(ns.output_dir).resolve()

    try:
        renderer = TemplateRenderer(Path(ns.templates_dir).resolve() if ns.templates_dir else None)
    except Exception:
        logger.exception("Failed to initialize templating")
        return 1

    try:
        api = load_api(Path(ns.api))
    except OSError:
        logger.exception("Failed to read API dump %s", ns.api)
        return 2
    except ValueError:
        logger.exception("API dump %s is not valid", ns.api)
        return 3

    try:
        ctx = Context.from_api(api)
        global_enums, class_enums = collect_enums(api)
    except ValueError:
        logger.exception("Malformed content in API dump %s", ns.api)
        return 3

    logger.info("Loaded %d engine class(es)", len(ctx))

    logger.info(
        "Built %d global enum(s) and %d class-local enum(s) across %d class(es)",
        len(global_enums),
        sum(len(v) for v in class_enums.values()),
        len(class_enums),
    )

    mapping = MappingConfig()

    if ns.resolve:
        print_resolved(TypeMapper(ctx, mapping), ns.resolve, sys.stdout)

    emitter = RustEmitter(
        out_dir,
        renderer,
        config=EmitterConfig(global_enum_module=mapping.global_enum_module),
        dry_run=ns.dry_run,
    )
    try:
        emitter.emit(global_enums, class_enums)
    except Exception:
        logger.exception("Failed to generate files")
        return 4

    if ns.dry_run:
        logger.info("Dry-run complete (no files written).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
