"""Stylesheet compilation for Quill.

``/css/<name>.css`` is built on request from a source in the styles
directory. LESS sources go through the ``lessc`` CLI; plain CSS is served as
is. Each source type has its own processor, tried in priority order.

Key classes:
- LessProcessor: Compiles ``<name>.less`` with lessc.
- CSSProcessor: Serves ``<name>.css`` unchanged.
- StylesheetCompiler: Finds a source for a name and runs its processor.
"""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from .config import SiteConfig
from .executable_utils import find_executable
from .utils import is_safe_name

CONTENT_TYPE = "text/css; charset=utf-8"


class StylesheetNotFound(FileNotFoundError):
    """No stylesheet source exists for a name."""


class BaseStyleProcessor(ABC):
    """Turns one kind of stylesheet source into CSS."""

    @property
    @abstractmethod
    def priority(self) -> int:
        """Return processor priority (higher = checked first)."""
        ...

    @property
    @abstractmethod
    def suffix(self) -> str:
        """Return the source file suffix this processor reads."""
        ...

    @abstractmethod
    def process(self, source: Path) -> str:
        """Produce CSS from a source file.

        Args:
            source: Source stylesheet path.

        Returns:
            CSS text.
        """
        ...


class LessProcessor(BaseStyleProcessor):
    """Compiles LESS sources with the lessc CLI.

    Falls back to the unprocessed source when lessc is missing or fails.
    """

    def __init__(self, project_root: Path):
        """Initialize the LESS processor.

        Args:
            project_root: Site root, searched for a local lessc install.
        """
        self.project_root = project_root

    @property
    def priority(self) -> int:
        return 90

    @property
    def suffix(self) -> str:
        return ".less"

    def process(self, source: Path) -> str:
        lessc = find_executable("lessc", self.project_root)
        if not lessc:
            print("lessc not found; serving unprocessed LESS source.")
            print("Install with `npm install -g less` or `npm install -D less` in the site.")
            return source.read_text(encoding="utf-8")

        result = subprocess.run(
            [lessc, str(source)],
            capture_output=True,
            text=True,
            cwd=str(source.parent),
        )
        if result.returncode != 0:
            print("LESS compilation failed:", result.stderr.strip())
            return source.read_text(encoding="utf-8")
        return result.stdout


class CSSProcessor(BaseStyleProcessor):
    """Serves plain CSS sources unchanged."""

    @property
    def priority(self) -> int:
        return 10

    @property
    def suffix(self) -> str:
        return ".css"

    def process(self, source: Path) -> str:
        return source.read_text(encoding="utf-8")


class StylesheetCompiler:
    """Resolves ``/css/<name>.css`` requests to compiled CSS.

    Attributes:
        styles_dir: Directory holding stylesheet sources.
    """

    def __init__(self, config: SiteConfig, processors: list[BaseStyleProcessor] | None = None):
        """Initialize the compiler.

        Args:
            config: Site configuration.
            processors: Optional custom processors; defaults to LESS then CSS.
        """
        self.styles_dir = config.styles_dir
        if processors is None:
            processors = [LessProcessor(config.root), CSSProcessor()]
        self._processors = sorted(processors, key=lambda p: p.priority, reverse=True)

    def find_source(self, name: str) -> tuple[Path, BaseStyleProcessor]:
        """Find the source file and processor for a stylesheet name.

        Args:
            name: Stylesheet name without extension.

        Returns:
            Tuple of (source path, processor).

        Raises:
            StylesheetNotFound: If the name is unsafe or no source exists.
        """
        if is_safe_name(name):
            for processor in self._processors:
                candidate = self.styles_dir / f"{name}{processor.suffix}"
                if candidate.is_file():
                    return candidate, processor
        raise StylesheetNotFound(f"No stylesheet source for {name!r} in {self.styles_dir}")

    def compile(self, name: str) -> str:
        """Compile the stylesheet called ``name``.

        Args:
            name: Stylesheet name without extension.

        Returns:
            CSS text.
        """
        source, processor = self.find_source(name)
        return processor.process(source)
