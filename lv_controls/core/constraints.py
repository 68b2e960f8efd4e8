from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union

# Default group: its fragments are AND-ed with everything else
NONE_GROUP = "_none"


@dataclass(frozen=True)
class OfflineConstraint:
    """
    Structured filter fragment used when the list view runs disconnected.

    Fields:

    - attribute: attribute (column) name the constraint applies to
    - operator: comparison operator, e.g. "contains", "equals", "greaterThan"
    - path: entity the attribute belongs to
    - value: value to compare against; an empty value disables the constraint
    """
    attribute: str
    operator: str
    path: str
    value: object = ""

    def __bool__(self) -> bool:
        return self.value is not None and self.value != ""


@dataclass(frozen=True)
class GroupedOfflineConstraint:
    """
    Several offline constraints combined with a single operator ("and" / "or").
    """
    constraints: Tuple[Union[OfflineConstraint, GroupedOfflineConstraint], ...] = field(default_factory=tuple)
    operator: str = "or"

    def __bool__(self) -> bool:
        return any(self.constraints)


OfflineFragment = Union[OfflineConstraint, GroupedOfflineConstraint]

# Online fragments are pre-bracketed predicates such as "[name='x']"
ConstraintFragment = Union[str, OfflineConstraint, GroupedOfflineConstraint]

# (attribute, direction) where direction is "asc" or "desc"
SortSpec = Tuple[str, str]

OfflineConstraints = List[OfflineFragment]
