from pydantic_settings import BaseSettings, SettingsConfigDict

from fateweaver.types import CritPolicy


class Settings(BaseSettings):
    # Crit handling
    crit_policy: CritPolicy = "chain"
    crit_sides: int = 20

    # External dice roller
    roll_timeout: float = 30.0

    # Duality bookkeeping
    fear_max: int = 12

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FATEWEAVER_")


settings = Settings()
