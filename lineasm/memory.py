from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class Stack:
    """LIFO stack, indexed from 1 at the bottom."""

    def __init__(self) -> None:
        self._items: List[Any] = []

    def push(self, value: Any) -> None:
        self._items.append(value)

    def pop(self) -> Optional[Any]:
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Optional[Any]:
        if not self._items:
            return None
        return self._items[-1]

    def get(self, index: int) -> Optional[Any]:
        if index < 1 or index > len(self._items):
            return None
        return self._items[index - 1]

    def size(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Stack({self._items!r})"


@dataclass
class Memory:
    stack: Stack = field(default_factory=Stack)
    heap: Dict[Any, Any] = field(default_factory=dict)

    def reset(self) -> None:
        self.stack.clear()
        self.heap.clear()
