"""Runtime configuration for Colony Planner."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven planner settings."""

    model_config = SettingsConfigDict(env_prefix="COLONY_PLANNER_", env_file=".env", extra="ignore")

    app_name: str = "colony-planner"
    log_level: str = "INFO"
    grid_bound: int = Field(default=50, description="Width/height of one world area; coordinates run 0..bound-1.")
    recheck_after: int = Field(default=50, description="Ticks to wait before rechecking after any change.")
    site_check_frequency: int = Field(default=300, description="Periodic recheck cadence; doubled at tier 8.")
    max_sites_per_colony: int = 10
    terminal_evacuation_threshold: int = Field(
        default=1000,
        description="Non-fuel resources a misplaced terminal may still hold before it is removed.",
    )
    spawn_rebuild_cost: int = 15000
    build_power: int = 5
    min_tier_for_storage_relocation: int = 4
    plan_store_path: str = Field(default=".colony_planner/plans.json", description="JSON plan store used by the CLI.")


settings = Settings()
