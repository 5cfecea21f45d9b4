#!/usr/bin/env python3
"""
Emitter module for generating Rust enum sources.

This module takes enum definitions (see `enums.make_enum_definition`) and uses
a Jinja2-based renderer to emit:

- <output_dir>/<global_enum_module>.rs   (enums not owned by a class, global.rs by default)
- <output_dir>/<class_module>.rs   (one per class declaring enums)

Design goals:
- Clean separation from type resolution and enum building.
- Atomic, idempotent file writing.
- Configurable template names.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from ..models import EnumDefinition
from ..naming import to_module_name
from ..utils import TemplateRenderer, ensure_dir, write_text

logger = logging.getLogger(__name__)


# --------------------------
# Configuration
# --------------------------

@dataclass(frozen=True)
class EmitterConfig:
    """
    Configuration for the Rust enum emitter.
    """
    enum_template: str = "enum.rs.j2"
    module_template: str = "enums_module.rs.j2"
    # Module holding enums not owned by a class; also names its file
    global_enum_module: str = "global"

    @property
    def global_enums_file(self) -> str:
        return f"{self.global_enum_module}.rs"


# --------------------------
# Emitter
# --------------------------

class RustEmitter:
    """
    Emit Rust enum definitions.

    Usage:
        emitter = RustEmitter(output_dir, renderer)
        emitter.emit(global_enums, class_enums)
    """

    def __init__(
        self,
        output_dir: Path,
        renderer: TemplateRenderer,
        config: Optional[EmitterConfig] = None,
        dry_run: bool = False,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.renderer = renderer
        self.config = config or EmitterConfig()
        self.dry_run = dry_run

    # ---- Public API ----

    def render_enum(self, definition: EnumDefinition) -> str:
        return self.renderer.render(self.config.enum_template, {"enum": definition.to_dict()})

    def render_module(self, owner: str, definitions: Sequence[EnumDefinition]) -> str:
        blocks = [self.render_enum(d) for d in definitions]
        return self.renderer.render(self.config.module_template, {"owner": owner, "blocks": blocks})

    def emit(
        self,
        global_enums: Sequence[EnumDefinition],
        class_enums: Mapping[str, Sequence[EnumDefinition]],
    ) -> List[Path]:
        """
        Write global and class-local enum modules. Returns the paths rendered.
        """
        if not self.dry_run:
            ensure_dir(self.output_dir)
        written: List[Path] = []

        if global_enums:
            path = self.output_dir / self.config.global_enums_file
            self._write(path, self.render_module("global scope", global_enums))
            written.append(path)

        # Reserve the global module so no class module can overwrite it
        modules: Dict[str, str] = {self.config.global_enum_module: "global scope"}
        for class_name, defs in class_enums.items():
            if not defs:
                continue
            module = to_module_name(class_name)
            if module in modules:
                logger.warning("Classes %s and %s map to the same module %s; skipping %s",
                               modules[module], class_name, module, class_name)
                continue
            modules[module] = class_name
            path = self.output_dir / f"{module}.rs"
            self._write(path, self.render_module(class_name, defs))
            written.append(path)

        logger.info("Generation complete under: %s", self.output_dir)
        return written

    # ---- Internals ----

    def _write(self, path: Path, content: str) -> None:
        try:
            write_text(path, content, dry_run=self.dry_run)
        except OSError:
            logger.exception("Failed to write %s", path)
            raise


__all__ = [
    "EmitterConfig",
    "RustEmitter",
]
