"""
Filesystem and path modules exposed to templates.

Templates reach these through the `require()` global. Every filesystem access
is confined to the sandbox root; anything else `require()` is asked for is an
inert placeholder.
"""

import os
from pathlib import Path
from typing import Any

from pdfsmith.shared.errors import TemplateError
from pdfsmith.shared.logging import get_logger

logger = get_logger(__name__)


class SandboxPath:
    """Path helpers resolved against the sandbox root."""

    def __init__(self, root: str | Path) -> None:
        self.root = str(Path(root).resolve())

    def resolve(self, *segments: str) -> str:
        """Absolute, normalized path; relative segments start from the root."""
        return os.path.normpath(os.path.join(self.root, *[str(s) for s in segments]))

    def join(self, *segments: str) -> str:
        if not segments:
            return "."
        return os.path.normpath(os.path.join(*[str(s) for s in segments]))

    def dirname(self, path: str) -> str:
        return os.path.dirname(str(path))

    def extname(self, path: str) -> str:
        return os.path.splitext(str(path))[1]


class SandboxFS:
    """Synchronous read/exists operations confined to the sandbox root."""

    def __init__(self, root: str | Path, encoding: str = "utf-8") -> None:
        self.root = Path(root).resolve()
        self.encoding = encoding

    def confine(self, path: str | Path) -> Path:
        """
        Resolve a path against the root and reject anything outside it.

        Raises:
            TemplateError: path escapes the sandbox root
        """
        resolved = (self.root / path).resolve()
        if not resolved.is_relative_to(self.root):
            raise TemplateError(
                f"path escapes template root: {path}",
                details={"path": str(path), "root": str(self.root)},
            )
        return resolved

    def exists_sync(self, path: str | Path) -> bool:
        try:
            return self.confine(path).is_file()
        except TemplateError:
            return False

    def read_file_sync(self, path: str | Path) -> str:
        resolved = self.confine(path)
        try:
            return resolved.read_text(encoding=self.encoding)
        except OSError as e:
            raise TemplateError(f"read failed for {path}: {e.strerror or e}") from e


class PlaceholderModule:
    """Stand-in for modules the sandbox does not emulate; every call is a no-op."""

    def __init__(self, name: str) -> None:
        self._name = name

    def __getattr__(self, attribute: str) -> Any:
        if attribute.startswith("_"):
            raise AttributeError(attribute)
        return lambda *args, **kwargs: None

    def __repr__(self) -> str:
        return f"<placeholder module {self._name!r}>"


class ModuleRegistry:
    """Resolves `require(name)` calls made from inside a template."""

    def __init__(self, root: str | Path) -> None:
        self.fs = SandboxFS(root)
        self.path = SandboxPath(root)
        self._modules: dict[str, Any] = {
            "fs": self.fs,
            "native-fs": self.fs,
            "path": self.path,
        }

    def require(self, name: str) -> Any:
        module = self._modules.get(name)
        if module is None:
            logger.debug(f"require({name!r}) is not emulated, returning placeholder")
            module = PlaceholderModule(name)
        return module
