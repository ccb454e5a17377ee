from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator


@dataclass(frozen=True)
class VisualNode:
    """Backend-neutral output of the renderers.

    `on_click` and `on_change` are live callbacks bound at render time; they
    are excluded from equality and from `to_dict()`.
    """

    kind: str
    node_id: str
    text: str | None = None
    style: dict[str, Any] = field(default_factory=dict)
    attrs: dict[str, Any] = field(default_factory=dict)
    children: tuple["VisualNode", ...] = ()
    on_click: Callable[[], None] | None = field(default=None, compare=False, repr=False)
    on_change: Callable[[str], None] | None = field(default=None, compare=False, repr=False)

    @property
    def interactive(self) -> bool:
        return self.on_click is not None or self.on_change is not None

    def walk(self) -> Iterator["VisualNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: str) -> "VisualNode | None":
        return next((node for node in self.walk() if node.node_id == node_id), None)

    def find_all(self, kind: str) -> list["VisualNode"]:
        return [node for node in self.walk() if node.kind == kind]

    def texts(self) -> list[str]:
        return [node.text for node in self.walk() if node.text]

    def click(self) -> bool:
        if self.on_click is None:
            return False
        self.on_click()
        return True

    def change(self, value: str) -> bool:
        if self.on_change is None:
            return False
        self.on_change(value)
        return True

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind, "id": self.node_id}
        if self.text is not None:
            out["text"] = self.text
        if self.style:
            out["style"] = dict(self.style)
        if self.attrs:
            out["attrs"] = dict(self.attrs)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out
