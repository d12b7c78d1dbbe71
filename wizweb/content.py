"""Registry of web pages held in memory and served by name."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

INITIAL_WEBPAGE = "index.html"
M_INITIAL_WEBPAGE = "m/index.html"
MOBILE_INITIAL_WEBPAGE = "mobile/index.html"

MAX_CONTENT_NAME_LEN = 128
MAX_CONTENT_CALLBACK = 20

# Contents shorter than this are shown in full by ContentStore.describe().
_SHOW_INLINE_BELOW = 30


class StorageType(IntEnum):
    """Where the body of a response is read from."""

    NONE = 0
    CODEFLASH = 1
    SDCARD = 2
    DATAFLASH = 3


def _as_bytes(data: str | bytes) -> bytes:
    raw = data.encode("latin-1") if isinstance(data, str) else bytes(data)
    nul = raw.find(b"\0")
    return raw if nul < 0 else raw[:nul]


@dataclass(frozen=True)
class WebContent:
    """A named page and its bytes."""

    name: str
    content: bytes

    @property
    def length(self) -> int:
        return len(self.content)


class ContentStore:
    """A fixed-capacity list of pages, looked up by exact name."""

    def __init__(self, capacity: int = MAX_CONTENT_CALLBACK) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._items: list[WebContent] = []

    def register(self, name: str | None, content: str | bytes | None) -> bool:
        """Add a page; its content ends at the first NUL byte.

        Returns False, adding nothing, when either argument is missing or the
        store is already full.
        """
        if name is None or content is None:
            return False
        if len(self._items) >= self.capacity:
            return False
        self._items.append(WebContent(str(name), _as_bytes(content)))
        return True

    def find(self, name: str) -> tuple[int, int] | None:
        """Return ``(index, length)`` of the first page with this name, or None."""
        for index, item in enumerate(self._items):
            if item.name == name:
                return index, item.length
        return None

    def read(self, index: int, offset: int, size: int) -> bytes:
        """Return up to ``size`` bytes of page ``index`` starting at ``offset``."""
        if not 0 <= index < len(self._items):
            raise IndexError(f"no web content with index {index}")
        if offset < 0 or size < 0:
            raise ValueError("offset and size must not be negative")
        return self._items[index].content[offset:offset + size]

    def describe(self) -> str:
        """A printable listing of the registered pages."""
        if not self._items:
            return ">> Web content file not found\r\n"
        lines = ["\r\n=== List of Web content in code flash ===\r\n"]
        for number, item in enumerate(self._items, start=1):
            if item.length < _SHOW_INLINE_BELOW:
                shown = f"[{item.content.decode('latin-1')}]"
            else:
                shown = "[ ... ]"
            lines.append(f" [{number}] {item.name}, {item.length} byte, {shown}\r\n")
        lines.append("=========================================\r\n\r\n")
        return "".join(lines)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)