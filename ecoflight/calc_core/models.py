from dataclasses import dataclass, field
from datetime import date
from typing import Any, Union

from ecoflight.calc_core.utils import sha256_json

DEFAULT_EMISSION_FACTOR = 2.31  # kg CO2 / L
DEFAULT_PRICE_PER_TONNE = 25.0  # EUR / tCO2
DEFAULT_DISPLAY_LIMIT = 20


@dataclass(frozen=True)
class KnownFuel:
    liters: float


@dataclass(frozen=True)
class EstimatedFuel:
    duration_min: Any
    capacity: Any = None
    aircraft_type: str | None = None


FuelSource = Union[KnownFuel, EstimatedFuel]


@dataclass(frozen=True)
class AircraftDescriptor:
    id: Any = None
    name: str = "Avion"
    registration: str = ""
    type: str | None = None
    capacity: Any = None  # seats
    emission_factor: Any = None  # kg CO2 / L
    fuel_type: str | None = None


@dataclass(frozen=True)
class FlightRecord:
    id: Any
    date: date | str | None = None
    duration: Any = None  # minutes
    destination: str | None = None
    pilot_id: Any = None
    pilot_name: str = "N/A"
    fuel_used: Any = None  # liters, known upstream
    landings: int | None = None
    aircraft: AircraftDescriptor = field(default_factory=AircraftDescriptor)

    def fuel_source(self) -> FuelSource:
        if self.fuel_used is not None:
            return KnownFuel(liters=self.fuel_used)
        return EstimatedFuel(
            duration_min=self.duration,
            capacity=self.aircraft.capacity,
            aircraft_type=self.aircraft.type,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date.isoformat() if isinstance(self.date, date) else self.date,
            "duration": self.duration if self.duration is not None else 0,
            "destination": self.destination,
            "pilot_id": self.pilot_id,
            "pilot_name": self.pilot_name,
            "landings": self.landings,
            "aircraft_id": self.aircraft.id,
            "aircraft_name": self.aircraft.name,
            "aircraft_registration": self.aircraft.registration,
            "aircraft_type": self.aircraft.type,
            "aircraft_capacity": self.aircraft.capacity,
            "fuel_type": self.aircraft.fuel_type,
        }


@dataclass(frozen=True)
class EmissionLevel:
    level: str
    label: str
    color: str

    def to_dict(self) -> dict[str, str]:
        return {"level": self.level, "label": self.label, "color": self.color}


LOW = EmissionLevel(level="low", label="Faible", color="#4CAF50")
MEDIUM = EmissionLevel(level="medium", label="Moyen", color="#ff9800")
HIGH = EmissionLevel(level="high", label="Élevé", color="#f44336")


@dataclass(frozen=True)
class CarbonPricing:
    price_per_tonne: float = DEFAULT_PRICE_PER_TONNE
    default_emission_factor: float = DEFAULT_EMISSION_FACTOR


@dataclass(frozen=True)
class AnalyzedFlight:
    flight: FlightRecord
    fuel_liters: float
    fuel_estimated: bool
    emission_factor: float
    co2_kg: float
    offset_cost: float
    emission_level: EmissionLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.flight.to_dict(),
            "fuel_liters": self.fuel_liters,
            "fuel_used": None if self.fuel_estimated else self.fuel_liters,
            "fuel_estimated": self.fuel_liters if self.fuel_estimated else None,
            "emission_factor": self.emission_factor,
            "co2_kg": self.co2_kg,
            "offset_cost": self.offset_cost,
            "emission_level": self.emission_level.to_dict(),
        }


@dataclass(frozen=True)
class AggregateStats:
    total_flights: int = 0
    total_co2: float = 0.0
    avg_co2: float = 0.0
    offset_cost: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_flights": self.total_flights,
            "total_co2": self.total_co2,
            "avg_co2": self.avg_co2,
            "offset_cost": self.offset_cost,
        }


@dataclass(frozen=True)
class CarbonAnalysis:
    """
    Full-batch stats next to a display-capped flight list.

    `stats.total_flights` counts every analyzed flight, `flights` only holds
    the first `display_limit` of them.
    """
    stats: AggregateStats
    flights: tuple[AnalyzedFlight, ...]
    recommendations: tuple[str, ...]
    pricing: CarbonPricing
    display_limit: int

    def to_dict(self) -> dict[str, Any]:
        result = {
            "stats": self.stats.to_dict(),
            "flights": [f.to_dict() for f in self.flights],
            "recommendations": list(self.recommendations),
            "meta": {
                "engine": "FlightCarbonEstimator",
                "deterministic": True,
                "display_limit": self.display_limit,
                "price_per_tonne": self.pricing.price_per_tonne,
            },
        }
        result["meta"]["result_hash"] = sha256_json(result)
        return result
