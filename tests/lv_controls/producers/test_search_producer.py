from __future__ import annotations

import pandas as pd
import pytest

from lv_controls.core.constraints import NONE_GROUP, GroupedOfflineConstraint, OfflineConstraint
from lv_controls.core.list_view import DataFrameListView
from lv_controls.core.scheduler import UpdateScheduler
from lv_controls.core.timers import ManualTimerService
from lv_controls.producers.search import SearchProducer, escape_quotes
from lv_controls.validation.errors import ValidationError

ENTITY = "Shop.Product"
STATUS_CAPTIONS = {"Active": "Available", "Discontinued": "No longer sold", "Backorder": "Awaiting stock"}


def _make_scheduler(offline: bool = False):
    timers = ManualTimerService()
    data = pd.DataFrame(
        {
            "Name": ["Claw hammer", "Garden hose", "Whisk"],
            "Status": ["Active", "Backorder", "Discontinued"],
        }
    )
    list_view = DataFrameListView(data, entity=ENTITY, timers=timers)
    return UpdateScheduler(list_view, timers, is_offline=lambda: offline), list_view, timers


def _make_search(offline: bool = False, **kwargs):
    scheduler, list_view, timers = _make_scheduler(offline)
    search = SearchProducer(
        scheduler,
        producer_id="search-1",
        entity=ENTITY,
        attributes=kwargs.pop("attributes", ["Name", "Status"]),
        enum_captions=kwargs.pop("enum_captions", {"Status": STATUS_CAPTIONS}),
        is_offline=lambda: offline,
    )
    return search, list_view, timers


def test_blank_search_clears_the_constraint():
    search, list_view, _ = _make_search()

    assert search.build_constraint("") == ""
    assert search.build_constraint("   ") == ""


def test_online_constraint_ors_every_attribute():
    search, list_view, _ = _make_search(enum_captions={})

    assert search.build_constraint(" hose ") == "[contains(Name,'hose') or contains(Status,'hose')]"


def test_online_enum_attribute_matches_captions():
    search, list_view, _ = _make_search()

    assert search.build_constraint("avail") == "[contains(Name,'avail') or Status='Active']"
    assert search.build_constraint("STOCK") == "[contains(Name,'STOCK') or Status='Backorder']"
    assert search.build_constraint("o") == (
        "[contains(Name,'o') or Status='Discontinued' or Status='Backorder']"
    )
    assert search.build_constraint("zzz") == '[contains(Name,\'zzz\') or contains(Status," ")]'


def test_single_quotes_are_escaped():
    search, list_view, _ = _make_search(enum_captions={})

    assert escape_quotes("chef's") == "chef''s"
    assert search.build_constraint("chef's") == "[contains(Name,'chef''s') or contains(Status,'chef''s')]"


def test_offline_constraint_is_an_or_group():
    search, list_view, _ = _make_search(offline=True)

    constraint = search.build_constraint("avail")

    assert constraint == GroupedOfflineConstraint(
        constraints=(
            OfflineConstraint(attribute="Name", operator="contains", path=ENTITY, value="avail"),
            OfflineConstraint(attribute="Status", operator="contains", path=ENTITY, value="Active"),
        ),
        operator="or",
    )


def test_offline_enum_without_match_uses_placeholder():
    search, list_view, _ = _make_search(offline=True)

    constraint = search.build_constraint("zzz")

    assert constraint.constraints[1] == OfflineConstraint(attribute="Status", operator="contains", path=ENTITY, value=" ")


def test_apply_search_writes_fragment_and_refreshes_list():
    search, list_view, timers = _make_search(offline=True)

    search.apply_search("hose")
    timers.advance(0.1)

    assert search.search_text == "hose"
    assert search.scheduler.store.constraints[NONE_GROUP]["search-1"] == search.build_constraint("hose")
    assert list(list_view.rows["Name"]) == ["Garden hose"]


def test_search_requires_attributes():
    scheduler, list_view, _ = _make_scheduler()

    with pytest.raises(ValidationError) as excinfo:
        SearchProducer(scheduler, producer_id="s", entity=ENTITY, attributes=[])

    assert excinfo.value.issues[0].code == "SEARCH_NO_ATTRIBUTES"
