from __future__ import annotations

from lv_controls.core.composer import (
    UpdateRequest,
    compose,
    compose_offline,
    compose_online,
    compose_sorting,
)
from lv_controls.core.constraint_store import ConstraintStore
from lv_controls.core.constraints import GroupedOfflineConstraint, OfflineConstraint


def _oc(attribute: str, value, operator: str = "equals") -> OfflineConstraint:
    return OfflineConstraint(attribute=attribute, operator=operator, path="Shop.Product", value=value)


def _make_grouped_store() -> ConstraintStore:
    store = ConstraintStore()
    store.set_constraint("p1", "[a='x']")
    store.set_constraint("p2", "[b='y']")
    store.set_constraint("f1", "[c='1']", group="g1")
    store.set_constraint("f2", "[c='2']", group="g1")
    return store


def test_online_composition_ands_default_group_and_ors_named_groups():
    assert compose_online(_make_grouped_store()) == "[a='x'][b='y'][c='1' or c='2']"


def test_empty_store_composes_to_no_filter():
    store = ConstraintStore()

    assert compose_online(store) == ""
    assert compose_offline(store) == ()
    assert compose_sorting(store) == ()

    request = compose(store)
    assert request == UpdateRequest(constraints="", sorting=(), offline=False)
    assert request.is_unfiltered


def test_group_with_only_empty_fragments_leaves_no_brackets():
    store = ConstraintStore()
    store.set_constraint("p1", "[a='x']")
    store.set_constraint("f1", "", group="g1")
    store.set_constraint("f2", "   ", group="g2")

    assert compose_online(store) == "[a='x']"
    assert "[]" not in compose_online(store)


def test_empty_fragments_are_dropped_inside_a_group():
    store = ConstraintStore()
    store.set_constraint("f1", "", group="g1")
    store.set_constraint("f2", " [c='2'] ", group="g1")

    assert compose_online(store) == "[c='2']"


def test_named_groups_follow_group_insertion_order():
    store = ConstraintStore()
    store.set_constraint("f1", "[z='1']", group="zeta")
    store.set_constraint("f2", "[a='1']", group="alpha")
    store.set_constraint("p1", "[n='1']")

    assert compose_online(store) == "[n='1'][z='1'][a='1']"


def test_composition_is_deterministic():
    store = _make_grouped_store()
    store.set_sorting("s1", ("Name", "asc"))

    assert compose(store) == compose(store)
    assert compose(store, offline=True) == compose(store, offline=True)


def test_online_composition_ignores_structured_fragments():
    store = ConstraintStore()
    store.set_constraint("p1", "[a='x']")
    store.set_constraint("p2", _oc("b", "y"))

    assert compose_online(store) == "[a='x']"


def test_sort_composition_drops_partial_pairs():
    store = ConstraintStore()
    store.set_sorting("p1", ["attr1", "asc"])
    store.set_sorting("p2", ["attr2", ""])
    store.set_sorting("p3", ["", "desc"])

    assert compose_sorting(store) == (("attr1", "asc"),)
    assert compose_sorting({"p1": ("attr1", "asc"), "p2": ("attr2", "")}) == (("attr1", "asc"),)


def test_offline_composition_keeps_only_valued_constraints():
    store = ConstraintStore()
    store.set_constraint("p1", _oc("Category", "Garden"))
    store.set_constraint("p2", _oc("Name", ""))
    store.set_constraint("p3", "[online='only']")

    assert compose_offline(store) == (_oc("Category", "Garden"),)


def test_offline_composition_turns_named_groups_into_or_groups():
    store = ConstraintStore()
    store.set_constraint("p1", _oc("Status", "Active"))
    store.set_constraint("f1", _oc("Category", "Garden"), group="cat")
    store.set_constraint("f2", _oc("Category", "Kitchen"), group="cat")
    store.set_constraint("f3", _oc("Price", "", operator="lessThan"), group="cat")
    store.set_constraint("g1", _oc("Stock", 0, operator="greaterThan"), group="stock")

    composed = compose_offline(store)

    assert composed == (
        _oc("Status", "Active"),
        GroupedOfflineConstraint(
            constraints=(_oc("Category", "Garden"), _oc("Category", "Kitchen")),
            operator="or",
        ),
        _oc("Stock", 0, operator="greaterThan"),
    )


def test_offline_composition_can_flatten_groups():
    store = ConstraintStore()
    store.set_constraint("p1", _oc("Status", "Active"))
    store.set_constraint("f1", _oc("Category", "Garden"), group="cat")
    store.set_constraint("f2", _oc("Category", "Kitchen"), group="cat")

    assert compose_offline(store, or_groups=False) == (
        _oc("Status", "Active"),
        _oc("Category", "Garden"),
        _oc("Category", "Kitchen"),
    )


def test_offline_or_group_members_are_merged_into_the_group():
    search = GroupedOfflineConstraint(
        constraints=(_oc("Name", "saw", operator="contains"), _oc("Status", "saw", operator="contains")),
        operator="or",
    )
    store = ConstraintStore()
    store.set_constraint("search", search, group="any")
    store.set_constraint("f1", _oc("Category", "Garden"), group="any")

    composed = compose_offline(store)

    assert len(composed) == 1
    assert composed[0].operator == "or"
    assert composed[0].constraints == search.constraints + (_oc("Category", "Garden"),)


def test_empty_grouped_constraint_is_dropped():
    store = ConstraintStore()
    store.set_constraint("search", GroupedOfflineConstraint(constraints=(_oc("Name", ""),)))

    assert compose_offline(store) == ()


def test_compose_offline_request_carries_sorting():
    store = ConstraintStore()
    store.set_constraint("p1", _oc("Category", "Garden"))
    store.set_sorting("s1", ("Price", "desc"))

    request = compose(store, offline=True)

    assert request.offline is True
    assert request.constraints == (_oc("Category", "Garden"),)
    assert request.sorting == (("Price", "desc"),)
