import os

# Basic settings helper to read environment configuration.

BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(BACKEND_DIR, "data")


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if val is None or val.strip() == "":
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _as_float(val: str | None, default: float) -> float:
    if val is None or val.strip() == "":
        return default
    try:
        return float(val)
    except ValueError:
        return default


class Settings:
    def __init__(self) -> None:
        self.GOOGLE_PLACES_API_KEY: str | None = os.getenv("GOOGLE_PLACES_API_KEY")
        self.AZURE_MAPS_API_KEY: str | None = os.getenv("AZURE_MAPS_API_KEY")

        self.PLACES_CACHE_TTL_SECONDS: int = _as_int(os.getenv("PLACES_CACHE_TTL_SECONDS"), 3600)
        self.PLACES_CACHE_MAX_ENTRIES: int = _as_int(os.getenv("PLACES_CACHE_MAX_ENTRIES"), 0)
        self.PLACES_CACHE_BACKEND: str = (os.getenv("PLACES_CACHE_BACKEND") or "memory").lower()
        self.PLACES_CACHE_PATH: str = os.getenv("PLACES_CACHE_PATH") or os.path.join(
            DATA_DIR, "places_cache.sqlite"
        )

        self.DAILY_BUDGET: dict[str, int] = {
            "google": _as_int(os.getenv("DAILY_BUDGET_GOOGLE"), 1000),
            "azure": _as_int(os.getenv("DAILY_BUDGET_AZURE"), 5000),
        }
        self.COST_RATES_USD: dict[str, float] = {
            "google": _as_float(os.getenv("COST_RATE_GOOGLE_PER_CALL_USD"), 0.032),
            "azure": _as_float(os.getenv("COST_RATE_AZURE_PER_CALL_USD"), 0.0045),
        }
        self.COST_SOFT_LIMIT_USD: float = _as_float(os.getenv("COST_SOFT_LIMIT_USD"), 10.0)

        self.PROVIDER_TIMEOUT_SECONDS: float = _as_float(os.getenv("PROVIDER_TIMEOUT_SECONDS"), 8.0)
        self.DEFAULT_PLACES_RADIUS_M: int = _as_int(os.getenv("DEFAULT_PLACES_RADIUS_M"), 20000)

        self.USAGE_STORE: str = (os.getenv("USAGE_STORE") or "memory").lower()
        self.PLACES_DB_URL: str = os.getenv("PLACES_DB_URL") or f"sqlite:///{os.path.join(DATA_DIR, 'places.db')}"

        self.DEBUG_LOGGING: bool = _as_bool(os.getenv("DEBUG_LOGGING"), False)


settings = Settings()
