from __future__ import annotations

from typing import Any, Iterator, List, Optional, Set

# Presentation markers toggled on the list view root node
INITIAL_LOADING_CLASS = "widget-data-source-helper-initial-loading"
LOADING_CLASS = "widget-data-source-helper-loading"

LIST_VIEW_CLASS = "mx-listview"


class DomNode:
    """
    Minimal page tree used to locate list views from a producer's position.

    A node may host a widget (e.g. a list view adapter); list view nodes carry
    the LIST_VIEW_CLASS marker.
    """

    def __init__(self, name: str = "div", classes: Optional[Set[str]] = None) -> None:
        self.name = name
        self.class_list: Set[str] = set(classes or ())
        self.parent: Optional[DomNode] = None
        self.children: List[DomNode] = []
        self.widget: Any = None

    def append(self, child: DomNode) -> DomNode:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def add_class(self, name: str) -> None:
        self.class_list.add(name)

    def remove_class(self, name: str) -> None:
        self.class_list.discard(name)

    def has_class(self, name: str) -> bool:
        return name in self.class_list

    @property
    def class_name(self) -> str:
        return " ".join(sorted(self.class_list))

    def iter_descendants(self) -> Iterator[DomNode]:
        """Depth-first, document order, excluding self."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def query_all(self, class_name: str) -> List[DomNode]:
        return [node for node in self.iter_descendants() if node.has_class(class_name)]

    def __repr__(self) -> str:
        return f"DomNode({self.name!r}, classes={sorted(self.class_list)!r})"
