from pydantic import BaseModel, Field

class OffsetCreate(BaseModel):
    flight_id: str
    co2_kg: float = Field(ge=0)
    note: str | None = None

class OffsetOut(BaseModel):
    id: int
    club_id: str
    user_id: str
    flight_id: str
    co2_kg: float
    offset_cost: float
    price_per_tonne: float
    note: str | None
    created_at: str

class OffsetSummaryOut(BaseModel):
    count: int
    total_co2: float
    total_offset_cost: float
