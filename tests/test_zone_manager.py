"""
Zone Manager Tests

Validates add / remove / list / edit input handling and outcomes.
"""

import logging

import pytest

from navzones.errors import NotFoundError, ValidationError
from navzones.zones import (
    DEFAULT_ZONE_RADIUS,
    Vector3,
    ZoneManager,
    ZoneOpStatus,
    ZoneRegistry,
    parse_index,
    parse_radius,
)

logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
logger = logging.getLogger(__name__)

REGION = 132
OTHER_REGION = 133


# ========================================
# ADD
# ========================================

@pytest.mark.parametrize("requested", [0, -1, -0.001, "0", "-5", "abc", "", "nan"])
def test_add_with_unusable_radius_uses_default(manager, requested) -> None:
    """
    Validates:
        - radius <= 0 or unparsable falls back to 5.0
        - the add still succeeds and is flagged as corrected
    """
    result = manager.add(REGION, center=Vector3(0.0, 0.0, 0.0), radius=requested)

    assert result.status is ZoneOpStatus.ADDED, f"Add failed for radius {requested!r}"
    assert result.corrected
    assert result.zone.radius == DEFAULT_ZONE_RADIUS == 5.0
    assert manager.registry.zones_for(REGION)[0].radius == 5.0


def test_add_without_radius_uses_default_silently(manager) -> None:
    result = manager.add(REGION, center=Vector3(0.0, 0.0, 0.0))

    assert result.success
    assert not result.corrected
    assert result.zone.radius == 5.0


def test_add_parses_textual_radius(manager) -> None:
    result = manager.add(REGION, center=Vector3(0.0, 0.0, 0.0), radius="7.5")

    assert result.zone.radius == 7.5
    assert not result.corrected


def test_add_reports_resolved_values(manager) -> None:
    result = manager.add(REGION, center=(1.5, 2.0, -3.0), radius=2)

    assert result.region == REGION
    assert result.index == 0
    assert result.zone.center == Vector3(1.5, 2.0, -3.0)
    assert result.message == "Added dead zone at (1.5, 2.0, -3.0) with radius 2.0 in zone 132."


def test_add_defaults_to_player_position(manager) -> None:
    result = manager.add(REGION)

    assert result.success
    assert result.zone.center == Vector3(1.0, 2.0, 3.0)


def test_add_at_target_without_target_is_not_found(manager) -> None:
    """
    Validates:
        - use_target with no target reports NotFoundError
        - the region listing is unchanged
    """
    before = manager.list(REGION)

    result = manager.add(REGION, use_target=True)

    assert result.status is ZoneOpStatus.NOT_FOUND
    assert not result.success
    assert isinstance(result.error, NotFoundError)
    assert result.message == "No target selected to add a dead zone at."
    after = manager.list(REGION)
    assert after.status is before.status is ZoneOpStatus.UNKNOWN_REGION
    assert after.entries == []


def test_add_at_target_uses_target_position() -> None:
    manager = ZoneManager(ZoneRegistry(), target_position=lambda: (4.0, 5.0, 6.0))

    result = manager.add(REGION, use_target=True, radius=3)

    assert result.success
    assert result.zone.center == Vector3(4.0, 5.0, 6.0)


def test_add_without_player_is_not_found() -> None:
    manager = ZoneManager(ZoneRegistry())

    result = manager.add(REGION)

    assert result.status is ZoneOpStatus.NOT_FOUND
    assert result.message == "Player not found."
    assert not manager.registry.has_region(REGION)


def test_add_with_invalid_region_is_validation_error(manager) -> None:
    result = manager.add(70000, center=Vector3(0.0, 0.0, 0.0))

    assert result.status is ZoneOpStatus.VALIDATION_ERROR
    assert isinstance(result.error, ValidationError)
    assert len(manager.registry) == 0


# ========================================
# LIST
# ========================================

def test_list_returns_insertion_order_with_indices(manager) -> None:
    for i in range(6):
        manager.add(REGION, center=Vector3(float(i), 0.0, 0.0), radius=1 + i)

    result = manager.list(REGION)

    assert result.status is ZoneOpStatus.LISTED
    assert [index for index, _ in result.entries] == list(range(6))
    assert [zone.center.x for _, zone in result.entries] == [float(i) for i in range(6)]
    assert [zone.radius for _, zone in result.entries] == [float(1 + i) for i in range(6)]


def test_list_unknown_and_empty_render_the_same(manager) -> None:
    unknown = manager.list(REGION)
    manager.add(REGION, center=Vector3(0.0, 0.0, 0.0))
    manager.remove(REGION, "all")
    empty = manager.list(REGION)

    assert unknown.status is ZoneOpStatus.UNKNOWN_REGION
    assert empty.status is ZoneOpStatus.EMPTY
    assert unknown.message == empty.message == "No dead zones defined for this zone."


# ========================================
# REMOVE
# ========================================

def test_remove_index_shifts_entries(manager) -> None:
    for i in range(4):
        manager.add(REGION, center=Vector3(float(i), 0.0, 0.0))

    result = manager.remove(REGION, "1")

    assert result.status is ZoneOpStatus.REMOVED
    assert result.message == "Removed dead zone #1 in zone 132."
    assert [z.center.x for _, z in manager.list(REGION).entries] == [0.0, 2.0, 3.0]


@pytest.mark.parametrize("selector", [3, "3", "-1", "two", "1.5", "+-1", "--1", "+-0", "1\u00b2", "+"])
def test_remove_bad_selector_is_validation_error(manager, selector) -> None:
    for i in range(3):
        manager.add(REGION, center=Vector3(float(i), 0.0, 0.0))

    result = manager.remove(REGION, selector)

    assert result.status is ZoneOpStatus.VALIDATION_ERROR, f"selector {selector!r}"
    assert isinstance(result.error, ValidationError)
    assert len(manager.registry.zones_for(REGION)) == 3, "Failed remove must not mutate"


def test_remove_from_empty_region_reports_nothing(manager) -> None:
    unknown = manager.remove(REGION, 0)
    manager.add(REGION, center=Vector3(0.0, 0.0, 0.0))
    manager.remove(REGION, 0)
    empty = manager.remove(REGION, "all")

    for result in (unknown, empty):
        assert result.status is ZoneOpStatus.NOTHING_TO_REMOVE
        assert result.success
        assert result.message == "No dead zones to remove for this zone."


def test_remove_all_is_idempotent(manager) -> None:
    for i in range(3):
        manager.add(REGION, center=Vector3(float(i), 0.0, 0.0))

    first = manager.remove(REGION, "ALL")
    second = manager.remove(REGION, "all")

    assert first.status is ZoneOpStatus.CLEARED
    assert second.status is ZoneOpStatus.NOTHING_TO_REMOVE
    listed = manager.list(REGION)
    assert listed.status is ZoneOpStatus.EMPTY
    assert listed.entries == []


def test_operations_do_not_touch_other_regions(manager) -> None:
    manager.add(OTHER_REGION, center=Vector3(7.0, 0.0, 0.0), radius=2)
    other_before = [z.to_tuple() for _, z in manager.list(OTHER_REGION).entries]

    manager.add(REGION, center=Vector3(0.0, 0.0, 0.0))
    manager.add(REGION, center=Vector3(1.0, 0.0, 0.0))
    manager.remove(REGION, 0)
    manager.edit(REGION, 0, radius=12)
    manager.remove(REGION, "all")

    other_after = [z.to_tuple() for _, z in manager.list(OTHER_REGION).entries]
    assert other_after == other_before


# ========================================
# EDIT
# ========================================

def test_edit_updates_zone_in_place(manager) -> None:
    manager.add(REGION, center=Vector3(0.0, 0.0, 0.0), radius=2)
    zone = manager.registry.zones_for(REGION)[0]

    result = manager.edit(REGION, 0, center=Vector3(1.0, 1.0, 1.0), radius=4)

    assert result.status is ZoneOpStatus.EDITED
    assert zone.center == Vector3(1.0, 1.0, 1.0)
    assert zone.radius == 4.0


@pytest.mark.parametrize("requested, expected", [(0.0, 0.1), (-4.0, 0.1), (99.0, 30.0)])
def test_edit_clamps_radius_to_editor_range(manager, requested, expected) -> None:
    manager.add(REGION, center=Vector3(0.0, 0.0, 0.0), radius=2)

    manager.edit(REGION, 0, radius=requested)

    assert manager.registry.zones_for(REGION)[0].radius == pytest.approx(expected)


def test_edit_out_of_range_index_fails(manager) -> None:
    manager.add(REGION, center=Vector3(0.0, 0.0, 0.0))

    result = manager.edit(REGION, 1, radius=3)

    assert result.status is ZoneOpStatus.VALIDATION_ERROR
    assert result.region == REGION, "Validated region key should be reported"


@pytest.mark.parametrize("region", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_region_is_validation_error(manager, region) -> None:
    """
    Validates:
        - non-finite region keys come back as results on every operation
        - nothing is stored
    """
    outcomes = [
        manager.add(region, radius=2),
        manager.remove(region, 0),
        manager.list(region),
        manager.edit(region, 0, radius=2),
    ]

    for result in outcomes:
        assert result.status is ZoneOpStatus.VALIDATION_ERROR
        assert isinstance(result.error, ValidationError)
        assert result.region is None
    assert len(manager.registry) == 0


# ========================================
# PARSERS
# ========================================

def test_parse_radius() -> None:
    assert parse_radius(None) == (5.0, False)
    assert parse_radius("2.5") == (2.5, False)
    assert parse_radius("inf") == (5.0, True)
    assert parse_radius(-1, default=3.0) == (3.0, True)


def test_parse_index() -> None:
    assert parse_index(4) == 4
    assert parse_index(" 2 ") == 2
    with pytest.raises(ValidationError):
        parse_index("x")
    with pytest.raises(ValidationError):
        parse_index(-2)
    with pytest.raises(ValidationError):
        parse_index(True)
    assert parse_index("+3") == 3
    for text in ("+-1", "--1", "1\u00b2", "\u0663"):
        with pytest.raises(ValidationError):
            parse_index(text)
