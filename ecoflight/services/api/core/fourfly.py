from ecoflight.services.api.core.config import settings
from ecoflight.services.fourfly.client import FourFlyClient

_client: FourFlyClient | None = None


def get_fourfly() -> FourFlyClient:
    global _client
    if _client is None:
        _client = FourFlyClient(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    return _client


async def close_fourfly() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
