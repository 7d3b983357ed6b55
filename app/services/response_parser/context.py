"""
Parse context: the claimed-lines model threaded through the extractor chain.

The input is split into lines once. Each extractor reads the open
(unclaimed) lines and claims the indices it consumed, so later stages never
see a line an earlier stage already turned into structure. The remaining
text is always the open lines joined back together.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Set, Tuple


@dataclass
class ParseContext:
    source: str
    lines: List[str] = field(init=False)
    _claimed: Set[int] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self):
        self.lines = self.source.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    def open_lines(self) -> List[Tuple[int, str]]:
        """(index, line) pairs not yet claimed, in source order."""
        return [(i, line) for i, line in enumerate(self.lines) if i not in self._claimed]

    def open_lines_after(self, index: int) -> List[Tuple[int, str]]:
        return [(i, line) for i, line in self.open_lines() if i > index]

    def is_claimed(self, index: int) -> bool:
        return index in self._claimed

    def claim(self, indices: Iterable[int]):
        self._claimed.update(indices)

    def snapshot(self) -> Set[int]:
        return set(self._claimed)

    def restore(self, claimed: Set[int]):
        self._claimed = set(claimed)

    @property
    def remaining_text(self) -> str:
        return "\n".join(line for _, line in self.open_lines()).strip()
