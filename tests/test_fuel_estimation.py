import pytest

from ecoflight.calc_core.engines import (
    burn_rate,
    estimate_fuel,
    normalize_capacity,
    normalize_duration,
    resolve_fuel,
)
from ecoflight.calc_core.errors import InvalidFlightRecord
from ecoflight.calc_core.models import AircraftDescriptor, EstimatedFuel, FlightRecord, KnownFuel


@pytest.mark.parametrize("duration", [0, 1, 45, 60, 95, 600])
@pytest.mark.parametrize("capacity", [4, 5, 9])
def test_four_seats_burn_33_l_per_hour(duration, capacity):
    assert estimate_fuel(duration, capacity, "ULM") == pytest.approx(33 * duration / 60)


@pytest.mark.parametrize("capacity,aircraft_type", [(1, None), (2, None), (2, "avion"), (None, "ULM"), (None, "ulm"), (3, " Ulm ")])
def test_ulm_or_two_seats_burn_15_l_per_hour(capacity, aircraft_type):
    assert estimate_fuel(90, capacity, aircraft_type) == pytest.approx(15 * 90 / 60)


@pytest.mark.parametrize("capacity,aircraft_type", [(None, None), (3, None), (3, "avion"), (None, "planeur"), (0, None), ("abc", None)])
def test_unknown_or_three_seats_default_to_33(capacity, aircraft_type):
    assert burn_rate(capacity, aircraft_type) == 33.0
    assert estimate_fuel(120, capacity, aircraft_type) == pytest.approx(66.0)


def test_zero_or_missing_duration_yields_zero_fuel():
    assert estimate_fuel(0, 4) == 0.0
    assert estimate_fuel(None, 2) == 0.0
    assert estimate_fuel("", None) == 0.0


def test_numeric_strings_are_accepted():
    assert normalize_duration("30") == 30.0
    assert normalize_capacity("4") == 4
    assert estimate_fuel("60", "2") == pytest.approx(15.0)


@pytest.mark.parametrize("bad", [-1, "une heure", float("nan"), True, [60]])
def test_malformed_duration_is_rejected(bad):
    with pytest.raises(InvalidFlightRecord):
        normalize_duration(bad)


def test_known_fuel_bypasses_estimation():
    flight = FlightRecord(id=1, duration=600, fuel_used=12.5, aircraft=AircraftDescriptor(capacity=4))
    assert flight.fuel_source() == KnownFuel(liters=12.5)
    assert resolve_fuel(flight.fuel_source()) == (12.5, False)


def test_missing_fuel_selects_estimate_branch():
    flight = FlightRecord(id=1, duration=60, aircraft=AircraftDescriptor(capacity=2, type="avion"))
    source = flight.fuel_source()
    assert source == EstimatedFuel(duration_min=60, capacity=2, aircraft_type="avion")
    liters, estimated = resolve_fuel(source)
    assert estimated is True
    assert liters == pytest.approx(15.0)


def test_negative_known_fuel_is_rejected():
    with pytest.raises(InvalidFlightRecord):
        resolve_fuel(KnownFuel(liters=-3))
