from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

from lv_controls.validation.errors import ValidationIssue, ValidationError

if TYPE_CHECKING:
    from lv_controls.producers.drop_down_filter import FilterOption
    from lv_controls.producers.drop_down_sort import SortOption


def validate_search_attributes(attributes: Sequence[str]) -> None:
    issues: list[ValidationIssue] = []

    if not attributes:
        issues.append(ValidationIssue("SEARCH_NO_ATTRIBUTES", "At least one search attribute is required."))

    for attr in attributes:
        if not attr or not attr.strip():
            issues.append(ValidationIssue("SEARCH_EMPTY_ATTRIBUTE", "Search attributes must not be empty."))
            break

    if issues:
        raise ValidationError(issues)


def validate_filter_options(options: Sequence["FilterOption"]) -> None:
    issues: list[ValidationIssue] = []

    if not options:
        issues.append(ValidationIssue("FILTER_NO_OPTIONS", "At least one filter option is required."))

    defaults = [o for o in options if o.is_default]
    if len(defaults) > 1:
        issues.append(ValidationIssue("FILTER_MULTIPLE_DEFAULTS", "Only one filter option can be the default."))

    for option in options:
        if option.constraint and not option.constraint.strip().startswith("["):
            issues.append(
                ValidationIssue(
                    "FILTER_CONSTRAINT_SYNTAX",
                    f"Constraint of option '{option.caption}' must start with '['.",
                )
            )

    if issues:
        raise ValidationError(issues)


def validate_sort_options(options: Sequence["SortOption"]) -> None:
    issues: list[ValidationIssue] = []

    if not options:
        issues.append(ValidationIssue("SORT_NO_OPTIONS", "At least one sort option is required."))

    defaults = [o for o in options if o.is_default]
    if len(defaults) > 1:
        issues.append(ValidationIssue("SORT_MULTIPLE_DEFAULTS", "Only one sort option can be the default."))

    for option in options:
        if not option.attribute:
            issues.append(ValidationIssue("SORT_NO_ATTRIBUTE", f"Sort option '{option.caption}' has no attribute."))
        if option.direction not in ("asc", "desc"):
            issues.append(
                ValidationIssue(
                    "SORT_DIRECTION",
                    f"Sort option '{option.caption}' direction must be 'asc' or 'desc'.",
                )
            )

    if issues:
        raise ValidationError(issues)
