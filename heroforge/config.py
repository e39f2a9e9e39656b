"""Application configuration loaded from environment variables and .env file."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DATABASE_URL: str = "sqlite:///./dev.db"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Content data
    ARCHETYPE_DATA_PATH: str = str(DATA_DIR / "archetypes.json")
    REWARD_TIER_DATA_PATH: str = str(DATA_DIR / "reward_tiers.json")

    # Forge economy
    FORGE_BASE_COST: int = 100
    FORGE_COST_MULTIPLIER: float = 1.2
    FORGE_MAX_LEVEL: int = 999

    # Player profile
    INVENTORY_SIZE: int = 136
    STARTING_CURRENCY: int = 0

    # Reset stored energy values known to be corrupt in old saves (48, 49)
    ENERGY_HEAL_LEGACY_VALUES: bool = False


settings = Settings()
