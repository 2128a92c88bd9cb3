"""Unit tests for ``Affiliate.is_open``."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from freezegun import freeze_time

from modules.affiliates.models import Affiliate

pytestmark = pytest.mark.unit

MX = ZoneInfo("America/Mexico_City")

# 2026-10-19 is a Monday.
MONDAY_NOON = datetime(2026, 10, 19, 12, 0, tzinfo=MX)


@pytest.fixture()
def affiliate():
    return Affiliate(
        id="5512340001",
        name="Doña Lupe",
        phone="5512340001",
        schedule={
            "monday": {"is_open": True, "open_time": "08:00", "close_time": "14:00"},
            "tuesday": {"is_open": False, "open_time": "08:00", "close_time": "14:00"},
        },
    )


def test_open_inside_window(affiliate):
    assert affiliate.is_open(MONDAY_NOON)


@pytest.mark.parametrize("hour,minute", [(8, 0), (14, 0)])
def test_window_bounds_are_inclusive(affiliate, hour, minute):
    assert affiliate.is_open(MONDAY_NOON.replace(hour=hour, minute=minute))


@pytest.mark.parametrize("hour,minute", [(7, 59), (14, 1), (23, 0)])
def test_closed_outside_window(affiliate, hour, minute):
    assert not affiliate.is_open(MONDAY_NOON.replace(hour=hour, minute=minute))


def test_closed_on_day_marked_closed(affiliate):
    tuesday = datetime(2026, 10, 20, 10, 0, tzinfo=MX)
    assert not affiliate.is_open(tuesday)


def test_closed_on_day_without_schedule(affiliate):
    sunday = datetime(2026, 10, 25, 10, 0, tzinfo=MX)
    assert not affiliate.is_open(sunday)


def test_temporary_closure_overrides_schedule(affiliate):
    affiliate.is_temporarily_closed = True
    assert not affiliate.is_open(MONDAY_NOON)


@freeze_time("2026-10-19 18:30:00")  # 12:30 in Mexico City
def test_defaults_to_current_time(affiliate, settings):
    settings.TIME_ZONE = "America/Mexico_City"
    assert affiliate.is_open()
