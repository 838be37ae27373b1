from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "EcoFlight Carbon API"
    ENV: str = "development"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    HTTP_TIMEOUT_SECONDS: float = 30.0

    APP_ID: str = "ecoflight"
    FRONTEND_URL: str | None = None
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "https://app.4fly.io"]

    OFFSET_PRICE_PER_TONNE: float = 25.0  # EUR / tCO2
    DEFAULT_EMISSION_FACTOR: float = 2.31  # kg CO2 / L
    FLIGHT_FETCH_LIMIT: int = 50
    FLIGHT_DISPLAY_LIMIT: int = 20

    DATABASE_URL: str = "sqlite:///./data/ecoflight.db"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        origins = list(self.CORS_ORIGINS)
        if self.FRONTEND_URL and self.FRONTEND_URL not in origins:
            origins.append(self.FRONTEND_URL)
        return origins

settings = Settings()
