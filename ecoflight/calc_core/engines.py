"""
Flight carbon estimator.

Per flight:
  fuel (L)   = known fuel_used, or burn_rate(capacity, type) * duration_min / 60
  co2 (kg)   = fuel * emission_factor            (factor defaults to 2.31 kg/L)
  offset     = co2 / 1000 * price_per_tonne      (price defaults to 25 EUR/t)
  level      = high (> 50 kg) | medium (> 20 kg) | low

Per batch:
  stats over every flight, recommendations from the average, display-capped
  flight list.

All functions are pure; no rounding happens here.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Sequence

from ecoflight.calc_core.errors import InvalidFlightRecord
from ecoflight.calc_core.models import (
    DEFAULT_DISPLAY_LIMIT,
    DEFAULT_EMISSION_FACTOR,
    DEFAULT_PRICE_PER_TONNE,
    HIGH,
    LOW,
    MEDIUM,
    AggregateStats,
    AnalyzedFlight,
    CarbonAnalysis,
    CarbonPricing,
    EmissionLevel,
    EstimatedFuel,
    FlightRecord,
    FuelSource,
    KnownFuel,
)

logger = logging.getLogger(__name__)

FOUR_SEAT_BURN_RATE = 33.0  # L/h, 100LL
LIGHT_BURN_RATE = 15.0  # L/h, ULM / 2 seats, SP98
ULM_TYPE = "ULM"

HIGH_THRESHOLD_KG = 50.0
MEDIUM_THRESHOLD_KG = 20.0

EFFICIENCY_THRESHOLD_KG = 30.0
OFFSET_THRESHOLD_KG = 10.0

REC_SHORTER_FLIGHTS = "Considérez des vols plus courts pour réduire la consommation"
REC_FLIGHT_PLAN = "Optimisez votre plan de vol pour économiser du carburant"
REC_OFFSET = "Compensez vos émissions avec des crédits carbone certifiés"
REC_SHARE = "Partagez vos vols pour répartir les émissions"


# -------------------------
# Input normalization
# -------------------------
def _to_number(x: Any, what: str) -> float:
    if isinstance(x, bool):
        raise InvalidFlightRecord(f"{what} must be numeric, got {x!r}")
    if isinstance(x, (int, float)):
        v = float(x)
    elif isinstance(x, str):
        try:
            v = float(x.strip())
        except ValueError:
            raise InvalidFlightRecord(f"{what} must be numeric, got {x!r}") from None
    else:
        raise InvalidFlightRecord(f"{what} must be numeric, got {type(x).__name__}")
    if math.isnan(v) or math.isinf(v):
        raise InvalidFlightRecord(f"{what} must be finite, got {x!r}")
    return v


def normalize_duration(duration: Any) -> float:
    """Minutes as float; a missing or empty duration counts as 0."""
    if duration is None or (isinstance(duration, str) and not duration.strip()):
        return 0.0
    minutes = _to_number(duration, "duration")
    if minutes < 0:
        raise InvalidFlightRecord(f"duration must be >= 0, got {duration!r}")
    return minutes


def normalize_capacity(capacity: Any) -> int | None:
    """Seat count, or None when unknown. Non-numeric and non-positive values are unknown."""
    if capacity is None or isinstance(capacity, bool):
        return None
    try:
        seats = int(float(capacity))
    except (TypeError, ValueError, OverflowError):
        logger.debug("Ignoring unparseable aircraft capacity %r", capacity)
        return None
    return seats if seats > 0 else None


def normalize_type(aircraft_type: Any) -> str:
    return str(aircraft_type or "").strip().upper()


def effective_emission_factor(emission_factor: Any, default: float = DEFAULT_EMISSION_FACTOR) -> float:
    """Upstream factor when it is a positive finite number, otherwise the default."""
    if emission_factor is None or isinstance(emission_factor, bool):
        return default
    try:
        f = float(emission_factor)
    except (TypeError, ValueError):
        return default
    if math.isnan(f) or math.isinf(f) or f <= 0:
        return default
    return f


# -------------------------
# 4.1 Fuel
# -------------------------
def burn_rate(capacity: Any = None, aircraft_type: Any = None) -> float:
    """
    Liters per hour by seat class.

    >= 4 seats wins over the type label; ULM or <= 2 seats burns 15 L/h;
    anything else (unknown capacity, 3 seats) falls back to 33 L/h.
    """
    seats = normalize_capacity(capacity)
    if seats is not None and seats >= 4:
        return FOUR_SEAT_BURN_RATE
    if normalize_type(aircraft_type) == ULM_TYPE or (seats is not None and seats <= 2):
        return LIGHT_BURN_RATE
    return FOUR_SEAT_BURN_RATE


def estimate_fuel(duration_min: Any = None, capacity: Any = None, aircraft_type: Any = None) -> float:
    return burn_rate(capacity, aircraft_type) * (normalize_duration(duration_min) / 60)


def normalize_fuel(liters: Any, what: str = "fuel_used") -> float:
    """Liters as float; missing counts as 0, negative or non-numeric is rejected."""
    if liters is None or (isinstance(liters, str) and not liters.strip()):
        return 0.0
    v = _to_number(liters, what)
    if v < 0:
        raise InvalidFlightRecord(f"{what} must be >= 0, got {liters!r}")
    return v


def resolve_fuel(source: FuelSource) -> tuple[float, bool]:
    """(liters, estimated?) for either branch of the fuel source."""
    if isinstance(source, KnownFuel):
        return normalize_fuel(source.liters), False
    if isinstance(source, EstimatedFuel):
        return estimate_fuel(source.duration_min, source.capacity, source.aircraft_type), True
    raise TypeError(f"Unknown fuel source: {source!r}")


# -------------------------
# 4.2 - 4.4 CO2 / cost / level
# -------------------------
def calculate_co2(
    fuel_liters: float,
    emission_factor: Any = None,
    default: float = DEFAULT_EMISSION_FACTOR,
) -> float:
    return fuel_liters * effective_emission_factor(emission_factor, default)


def calculate_offset_cost(co2_kg: float, price_per_tonne: float = DEFAULT_PRICE_PER_TONNE) -> float:
    return (co2_kg / 1000) * price_per_tonne


def classify_emission(co2_kg: float) -> EmissionLevel:
    # strict comparisons: 50.0 is medium, 20.0 is low
    if co2_kg > HIGH_THRESHOLD_KG:
        return HIGH
    if co2_kg > MEDIUM_THRESHOLD_KG:
        return MEDIUM
    return LOW


# -------------------------
# Per flight
# -------------------------
def analyze_flight(flight: FlightRecord, pricing: CarbonPricing = CarbonPricing()) -> AnalyzedFlight:
    fuel_liters, estimated = resolve_fuel(flight.fuel_source())
    factor = effective_emission_factor(flight.aircraft.emission_factor, pricing.default_emission_factor)
    co2_kg = calculate_co2(fuel_liters, factor, pricing.default_emission_factor)
    return AnalyzedFlight(
        flight=flight,
        fuel_liters=fuel_liters,
        fuel_estimated=estimated,
        emission_factor=factor,
        co2_kg=co2_kg,
        offset_cost=calculate_offset_cost(co2_kg, pricing.price_per_tonne),
        emission_level=classify_emission(co2_kg),
    )


# -------------------------
# 4.5 / 4.6 Batch
# -------------------------
def aggregate(analyzed: Sequence[AnalyzedFlight]) -> AggregateStats:
    total_flights = len(analyzed)
    total_co2 = sum((f.co2_kg for f in analyzed), 0.0)
    total_offset = sum((f.offset_cost for f in analyzed), 0.0)
    return AggregateStats(
        total_flights=total_flights,
        total_co2=total_co2,
        avg_co2=total_co2 / max(total_flights, 1),
        offset_cost=total_offset,
    )


def generate_recommendations(avg_co2: float) -> list[str]:
    recommendations: list[str] = []
    if avg_co2 > EFFICIENCY_THRESHOLD_KG:
        recommendations.append(REC_SHORTER_FLIGHTS)
        recommendations.append(REC_FLIGHT_PLAN)
    if avg_co2 > OFFSET_THRESHOLD_KG:
        recommendations.append(REC_OFFSET)
    recommendations.append(REC_SHARE)
    return recommendations


def analyze(
    flights: Iterable[FlightRecord],
    *,
    pricing: CarbonPricing = CarbonPricing(),
    display_limit: int = DEFAULT_DISPLAY_LIMIT,
) -> CarbonAnalysis:
    if display_limit < 0:
        raise ValueError("display_limit must be >= 0")

    analyzed = [analyze_flight(f, pricing) for f in flights]
    stats = aggregate(analyzed)
    recommendations = generate_recommendations(stats.avg_co2)

    logger.debug(
        "Analyzed %d flights: total_co2=%.1f kg avg_co2=%.1f kg",
        stats.total_flights, stats.total_co2, stats.avg_co2,
    )
    return CarbonAnalysis(
        stats=stats,
        flights=tuple(analyzed[:display_limit]),
        recommendations=tuple(recommendations),
        pricing=pricing,
        display_limit=display_limit,
    )
