"""
Document adapters.

The extractor and analyzer only need a text accessor and a location. An open
editor buffer and a file on disk both provide them through the same
interface.
"""

from pathlib import Path
from typing import Optional, Protocol, Union


class TextDocument(Protocol):
    """Anything that can provide AL source text and its location."""

    path: str

    @property
    def file_name(self) -> str: ...

    @property
    def uri(self) -> str: ...

    def get_text(self) -> str: ...


class _DocumentLocation:
    path: str

    @property
    def file_name(self) -> str:
        return Path(self.path).name

    @property
    def uri(self) -> str:
        return Path(self.path).resolve().as_uri()


class BufferDocument(_DocumentLocation):
    """Source text held in memory, e.g. an unsaved editor buffer."""

    def __init__(self, text: str, path: Union[str, Path]):
        self.path = str(path)
        self._text = text

    def get_text(self) -> str:
        return self._text


class FileDocument(_DocumentLocation):
    """Source file read from disk whenever its text is requested."""

    def __init__(self, path: Union[str, Path], encoding: str = 'utf-8'):
        self.path = str(path)
        self.encoding = encoding

    def get_text(self) -> str:
        """
        Read the file content.

        Raises:
            FileNotFoundError: If the backing file does not exist
        """
        with open(self.path, 'r', encoding=self.encoding) as f:
            return f.read()

    @classmethod
    def for_object(cls, path: str, file_name: str) -> Optional['FileDocument']:
        """Get the backing file of an extracted object, if it has one."""
        if not file_name:
            return None
        return cls(Path(path) / file_name)
