"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

import os
import shutil
from pathlib import Path

from scaffold_sentinel.domain.errors import PathTraversalError
from scaffold_sentinel.domain.protocols import FileSystemProtocol

# Shell metacharacters never legitimately present in generated project paths.
DANGEROUS_PATH_CHARACTERS = ("|", "&", ";", "$", "`", "<", ">")


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def validate_path(self, path: str, root: str | None = None) -> str:
        """
        Resolve `path`, rejecting anything malformed or outside `root`.

        Rejected: empty paths, NUL bytes, '..' segments, shell metacharacters,
        and (when root is given) any path that resolves outside root.
        """
        if not path:
            raise PathTraversalError("path cannot be empty")
        if "\x00" in path:
            raise PathTraversalError(f"path contains null bytes: {path!r}")
        if ".." in Path(os.path.normpath(path)).parts:
            raise PathTraversalError(f"path contains invalid path traversal: {path}")
        for char in DANGEROUS_PATH_CHARACTERS:
            if char in path:
                raise PathTraversalError(f"path contains dangerous character {char!r}: {path}")
        resolved = Path(path).resolve()
        if root is not None:
            resolved_root = Path(root).resolve()
            if resolved != resolved_root and not resolved.is_relative_to(resolved_root):
                raise PathTraversalError(f"path {path} is outside project root {root}")
        return str(resolved)

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def is_directory(self, path: str) -> bool:
        return Path(path).is_dir()

    def is_file(self, path: str) -> bool:
        return Path(path).is_file()

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return Path(path).read_text(encoding=encoding)

    def safe_read_text(self, path: str, root: str) -> str:
        return Path(self.validate_path(path, root)).read_text(encoding="utf-8")

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding=encoding)

    def copy_file(self, source: str, destination: str) -> None:
        shutil.copy2(source, destination)

    def rename(self, source: str, destination: str) -> None:
        Path(source).rename(destination)

    def make_dirs(self, path: str, exist_ok: bool = True) -> None:
        Path(path).mkdir(parents=True, exist_ok=exist_ok)

    def join_path(self, *paths: str) -> str:
        return str(Path(*paths))

    def relative_to(self, path: str, root: str) -> str:
        try:
            return str(Path(path).relative_to(root))
        except ValueError:
            return path

    def walk_files(self, root: str, excluded_dirs: tuple[str, ...] = ()) -> list[str]:
        """Every file under root in sorted order, skipping excluded directory names."""
        if not Path(root).is_dir():
            return []
        excluded = set(excluded_dirs)
        files: list[str] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in excluded)
            files.extend(os.path.join(dirpath, name) for name in sorted(filenames))
        return files

    def file_mode(self, path: str) -> int:
        return Path(path).stat().st_mode & 0o777
