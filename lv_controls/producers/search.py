from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from lv_controls.core.constraints import ConstraintFragment, GroupedOfflineConstraint, OfflineConstraint
from lv_controls.core.scheduler import UpdateScheduler
from lv_controls.validation.producer_validation import validate_search_attributes

logger = logging.getLogger(__name__)

# Placeholder value used when an enumeration has no caption matching the query
NO_ENUM_MATCH_VALUE = " "


def escape_quotes(text: str) -> str:
    return text.replace("'", "''")


class SearchProducer:
    """
    Text-box search over one or more attributes of an entity.

    A search text matches a row when any attribute contains it. Enumeration
    attributes are matched by caption: every enum key whose caption contains
    the query becomes an equality test.

    :param scheduler: UpdateScheduler of the target list view
    :param producer_id: stable id of this search box
    :param entity: entity searched
    :param attributes: attributes to search
    :param enum_captions: attribute -> {enum key -> caption} for enumeration attributes
    :param is_offline: capability check choosing the constraint surface
    """

    def __init__(
        self,
        scheduler: UpdateScheduler,
        producer_id: str,
        entity: str,
        attributes: Sequence[str],
        enum_captions: Optional[Mapping[str, Mapping[str, str]]] = None,
        is_offline: Optional[Callable[[], bool]] = None,
    ) -> None:
        validate_search_attributes(attributes)
        self.scheduler = scheduler
        self.producer_id = producer_id
        self.entity = entity
        self.attributes = list(attributes)
        self.enum_captions: Dict[str, Mapping[str, str]] = dict(enum_captions or {})
        self._is_offline = is_offline or (lambda: False)
        self.search_text = ""

    def _matching_enum_keys(self, attribute: str, query: str) -> List[str]:
        needle = query.lower()
        return [key for key, caption in self.enum_captions[attribute].items() if needle in caption.lower()]

    def build_constraint(self, search_text: str) -> ConstraintFragment:
        query = (search_text or "").strip()
        if not query:
            return ""

        if self._is_offline():
            return self._offline_constraint(query)
        return self._online_constraint(query)

    def _online_constraint(self, query: str) -> str:
        escaped = escape_quotes(query)
        predicates: List[str] = []
        for attribute in self.attributes:
            if attribute in self.enum_captions:
                matches = self._matching_enum_keys(attribute, query)
                if matches:
                    predicates.extend(f"{attribute}='{escape_quotes(key)}'" for key in matches)
                else:
                    predicates.append(f'contains({attribute},"{NO_ENUM_MATCH_VALUE}")')
            else:
                predicates.append(f"contains({attribute},'{escaped}')")
        return "[" + " or ".join(predicates) + "]"

    def _offline_constraint(self, query: str) -> GroupedOfflineConstraint:
        constraints: List[OfflineConstraint] = []
        for attribute in self.attributes:
            if attribute in self.enum_captions:
                matches = self._matching_enum_keys(attribute, query) or [NO_ENUM_MATCH_VALUE]
                constraints.extend(
                    OfflineConstraint(attribute=attribute, operator="contains", path=self.entity, value=value)
                    for value in matches
                )
            else:
                constraints.append(
                    OfflineConstraint(attribute=attribute, operator="contains", path=self.entity, value=query)
                )
        return GroupedOfflineConstraint(constraints=tuple(constraints), operator="or")

    def apply_search(self, search_text: str) -> ConstraintFragment:
        constraint = self.build_constraint(search_text)
        logger.debug("Search applied", extra={"producer": self.producer_id, "query": search_text})
        self.scheduler.set_constraint(self.producer_id, constraint)
        self.search_text = search_text
        return constraint
