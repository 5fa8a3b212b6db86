"""Append-only buffer holding the agenda text of one run."""

from typing import List

HEADER = "# -*- eval: (auto-revert-mode 1); -*-\n#+category: cal\n"


class OutlineDocument:
    """Ordered org-mode text accumulated across calendars and events."""

    def __init__(self, filetags: str = "") -> None:
        self._parts: List[str] = [HEADER]
        if filetags:
            self._parts.append(f"#+filetags: :{filetags}:\n")

    def append(self, text: str) -> None:
        self._parts.append(text)

    def text(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.text()
