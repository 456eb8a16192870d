"""File system access for the key extractor."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List


class FileSystem(ABC):
    """Abstract file access used by the extractor.

    Paths are plain strings so implementations are free to back them with
    something other than the local disk.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def is_file(self, path: str) -> bool:
        pass

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        pass

    @abstractmethod
    def list_files(self, root: str, recursive: bool = True) -> List[str]:
        """List files under root, sorted by path.

        Args:
            root: Directory to enumerate.
            recursive: Descend into subdirectories when True.
        """
        pass

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Read a file as text.

        Raises:
            OSError: If the file cannot be read.
        """
        pass


class LocalFileSystem(FileSystem):
    """FileSystem backed by pathlib."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def is_file(self, path: str) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def list_files(self, root: str, recursive: bool = True) -> List[str]:
        base = Path(root)
        entries = base.rglob("*") if recursive else base.iterdir()
        return sorted(str(entry) for entry in entries if entry.is_file())

    def read_text(self, path: str) -> str:
        # Undecodable bytes become U+FFFD
        return Path(path).read_text(encoding=self.encoding, errors="replace")
