"""
Pure composition of a ConstraintStore snapshot into the request sent to a
list view: one filter expression plus an ordered list of sort pairs.

Two surfaces are supported:
- online: a textual query built from bracketed predicates, e.g. "[a='x'][b='y' or b='z']"
- offline: a list of structured constraints, implicitly AND-ed by the consumer
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Tuple, Union

from .constraint_store import ConstraintStore
from .constraints import (
    NONE_GROUP,
    ConstraintFragment,
    GroupedOfflineConstraint,
    OfflineConstraint,
    OfflineFragment,
    SortSpec,
)


@dataclass(frozen=True)
class UpdateRequest:
    """
    Everything a list view needs for one refresh.

    - constraints: composed filter; a string when online, a tuple of offline
      fragments when offline. Empty means "no filter".
    - sorting: ordered (attribute, direction) pairs
    - offline: which surface `constraints` is expressed in
    """
    constraints: Union[str, Tuple[OfflineFragment, ...]] = ""
    sorting: Tuple[SortSpec, ...] = field(default_factory=tuple)
    offline: bool = False

    @property
    def is_unfiltered(self) -> bool:
        return not self.constraints


def _strip_brackets(fragment: str) -> str:
    text = fragment.strip()
    if text.startswith("[") and text.endswith("]"):
        return text[1:-1]
    return text


def _online_text(fragment: ConstraintFragment) -> str:
    # Structured fragments have no textual form
    return fragment if isinstance(fragment, str) else ""


def compose_online(store: ConstraintStore) -> str:
    constraints = store.constraints

    ungrouped = "".join(_online_text(f) for f in constraints.get(NONE_GROUP, {}).values())

    grouped: List[str] = []
    for group, fragments in constraints.items():
        if group == NONE_GROUP:
            continue
        bodies = [
            _strip_brackets(text)
            for text in (_online_text(f) for f in fragments.values())
            if text and text.strip()
        ]
        body = " or ".join(b for b in bodies if b)
        if body:
            grouped.append(f"[{body}]")

    return ungrouped + "".join(grouped)


def _kept_offline(fragments: Iterable[ConstraintFragment]) -> List[OfflineFragment]:
    return [
        f for f in fragments
        if isinstance(f, (OfflineConstraint, GroupedOfflineConstraint)) and f
    ]


def compose_offline(store: ConstraintStore, or_groups: bool = True) -> Tuple[OfflineFragment, ...]:
    """
    Build the offline constraint list.

    :param or_groups: when True, each named group becomes one "or"
        GroupedOfflineConstraint (a lone survivor is emitted as-is), matching
        the online semantics. When False, every group is flattened into the
        AND-ed list.
    """
    composed: List[OfflineFragment] = []
    for group, fragments in store.constraints.items():
        kept = _kept_offline(fragments.values())
        if not kept:
            continue
        if group == NONE_GROUP or not or_groups or len(kept) == 1:
            composed.extend(kept)
        else:
            members: List[OfflineFragment] = []
            for fragment in kept:
                if isinstance(fragment, GroupedOfflineConstraint) and fragment.operator == "or":
                    members.extend(c for c in fragment.constraints if c)
                else:
                    members.append(fragment)
            composed.append(GroupedOfflineConstraint(constraints=tuple(members), operator="or"))
    return tuple(composed)


def compose_sorting(sorting: Mapping[str, SortSpec] | ConstraintStore) -> Tuple[SortSpec, ...]:
    if isinstance(sorting, ConstraintStore):
        sorting = sorting.sorting
    pairs: List[SortSpec] = []
    for spec in sorting.values():
        if len(spec) >= 2 and spec[0] and spec[1]:
            pairs.append((spec[0], spec[1]))
    return tuple(pairs)


def compose(store: ConstraintStore, offline: bool = False, or_groups: bool = True) -> UpdateRequest:
    if offline:
        constraints: Union[str, Tuple[OfflineFragment, ...]] = compose_offline(store, or_groups=or_groups)
    else:
        constraints = compose_online(store)
    return UpdateRequest(constraints=constraints, sorting=compose_sorting(store), offline=offline)
