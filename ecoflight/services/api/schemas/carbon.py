from typing import Any

from pydantic import BaseModel

class EmissionLevelOut(BaseModel):
    level: str
    label: str
    color: str

class AnalyzedFlightOut(BaseModel):
    id: Any
    date: str | None
    duration: float | int
    destination: str | None
    pilot_id: Any
    pilot_name: str
    landings: int | None
    aircraft_id: Any
    aircraft_name: str
    aircraft_registration: str
    aircraft_type: str | None
    aircraft_capacity: Any
    fuel_type: str | None
    fuel_liters: float
    fuel_used: float | None
    fuel_estimated: float | None
    emission_factor: float
    co2_kg: float
    offset_cost: float
    emission_level: EmissionLevelOut

class StatsOut(BaseModel):
    total_flights: int
    total_co2: float
    avg_co2: float
    offset_cost: float

class AnalysisMetaOut(BaseModel):
    engine: str
    deterministic: bool
    display_limit: int
    price_per_tonne: float
    result_hash: str

class CarbonAnalysisOut(BaseModel):
    success: bool
    user: dict
    stats: StatsOut
    flights: list[AnalyzedFlightOut]
    recommendations: list[str]
    meta: AnalysisMetaOut
