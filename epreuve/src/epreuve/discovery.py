"""
Class discovery - turns paths and module names into candidate classes.

Targets:
- Directory: searched recursively for files matching the pattern
- .py file: imported directly
- Dotted module name: imported with importlib

Every class defined in an imported module is a candidate; pruning
decides later which of them hold tests.
"""

import importlib
import importlib.util
import inspect
import sys
from fnmatch import fnmatch
from pathlib import Path
from types import ModuleType
from typing import Iterable, List, Optional, Set

from epreuve.exceptions import DiscoveryError
from epreuve.reporter.emojis import EpreuveEmoji
from epreuve.reporter.system_reporter import SystemReporter

DEFAULT_PATTERN = "test_*.py"

SKIPPED_DIRS = {
    "__pycache__",
    "node_modules",
    "venv",
    ".venv",
    "build",
    "dist",
    "logs",
}


class ClassDiscoverer:
    """
    Imports test modules and collects the classes they define.
    """

    def __init__(
        self,
        reporter: Optional[SystemReporter] = None,
        strict: bool = False,
        root: Optional[Path] = None,
    ):
        """
        Initialize class discoverer.

        Args:
            reporter: Optional reporter for logging
            strict: Raise DiscoveryError on import failures instead of skipping
            root: Base directory for module naming (default: cwd)
        """
        self.reporter = reporter or SystemReporter(name="epreuve_discovery", verbose=1)
        self.strict = strict
        self.root = (root or Path.cwd()).resolve()

    def discover(
        self, targets: Iterable[str], pattern: str = DEFAULT_PATTERN
    ) -> Set[type]:
        """
        Collect candidate classes from targets.

        Args:
            targets: Directories, .py files or dotted module names
            pattern: File name pattern used inside directories

        Returns:
            Set of classes defined in the imported modules
        """
        classes: Set[type] = set()

        for target in targets:
            for module in self.import_target(target, pattern):
                classes.update(self.classes_in(module))

        self.reporter.debug(
            f"{EpreuveEmoji.DISCOVER} Discovered {len(classes)} candidate class(es)",
            context="Discovery",
            verbose_level=2,
        )
        return classes

    def find_files(
        self, directory: Path, pattern: str = DEFAULT_PATTERN
    ) -> List[Path]:
        """
        Find test files below a directory.

        Args:
            directory: Directory to search recursively
            pattern: File name pattern (e.g. "test_*.py")

        Returns:
            Sorted list of matching files
        """
        files = []
        for path in sorted(directory.rglob("*.py")):
            parts = path.relative_to(directory).parts
            if any(part in SKIPPED_DIRS or part.startswith(".") for part in parts):
                continue
            if fnmatch(path.name, pattern):
                files.append(path)
        return files

    def import_target(
        self, target: str, pattern: str = DEFAULT_PATTERN
    ) -> List[ModuleType]:
        """Import every module a target refers to."""
        path = Path(target)

        if path.is_dir():
            files = self.find_files(path, pattern)
            if not files:
                self.reporter.warning(
                    f"No files matching {pattern} in {path}", context="Discovery"
                )
            return [m for m in (self._import_file(f) for f in files) if m is not None]

        if path.suffix == ".py" and path.exists():
            module = self._import_file(path)
            return [module] if module is not None else []

        module = self._import_name(target)
        return [module] if module is not None else []

    @staticmethod
    def classes_in(module: ModuleType) -> Set[type]:
        """Classes defined (not merely imported) in a module."""
        return {
            member
            for _, member in inspect.getmembers(module, inspect.isclass)
            if member.__module__ == module.__name__
        }

    def module_name_for(self, path: Path) -> str:
        """Dotted module name for a file, relative to the root when possible."""
        resolved = path.resolve()
        try:
            parts = resolved.relative_to(self.root).with_suffix("").parts
        except ValueError:
            parts = (resolved.parent.name, resolved.stem)
        return ".".join(part for part in parts if part)

    # ================================================================
    # IMPORTING
    # ================================================================

    def _import_file(self, path: Path) -> Optional[ModuleType]:
        name = self.module_name_for(path)
        if name in sys.modules:
            return sys.modules[name]

        # Sibling imports inside test files resolve like a script's would.
        parent = str(path.resolve().parent)
        if parent not in sys.path:
            sys.path.insert(0, parent)

        try:
            spec = importlib.util.spec_from_file_location(name, path)
            module = importlib.util.module_from_spec(spec)
            sys.modules[name] = module
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(name, None)
            return self._import_failed(str(path), e)

        self.reporter.debug(f"Imported {path} as {name}", context="Discovery")
        return module

    def _import_name(self, name: str) -> Optional[ModuleType]:
        try:
            return importlib.import_module(name)
        except Exception as e:
            return self._import_failed(name, e)

    def _import_failed(self, target: str, error: Exception) -> None:
        if self.strict:
            raise DiscoveryError(target, error) from error
        self.reporter.warning(
            f"{EpreuveEmoji.WARNING} Skipping {target}: "
            f"{type(error).__name__}: {error}",
            context="Discovery",
        )
        return None
