"""Central configuration for duplicate analysis runs."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from leadres.core.models import ALGORITHM_VERSION
from leadres.core.modules.account_comparator import (
    ADDRESS_MATCH_THRESHOLD,
    ADDRESS_WEIGHT,
    NAME_MATCH_THRESHOLD,
    NAME_WEIGHT,
)
from leadres.storage.sqlite import DEFAULT_MAX_ACCOUNTS


class Settings(BaseSettings):
    """Configuration for the duplicate detector.

    Values load from environment variables prefixed with ``LEADRES_`` or
    from a ``.env`` file. Matching defaults equal the module constants in
    leadres.core.modules.account_comparator.

    Environment variables:
        LEADRES_DATABASE_PATH: SQLite database file (default: "leads.db")
        LEADRES_MAX_ACCOUNTS: Upper bound on accounts loaded per run (default: 10000)
        LEADRES_NAME_MATCH_THRESHOLD: Name similarity threshold, 0-100 (default: 85)
        LEADRES_ADDRESS_MATCH_THRESHOLD: Address similarity threshold, 0-100 (default: 80)
        LEADRES_NAME_WEIGHT / LEADRES_ADDRESS_WEIGHT: Overall score weights (default: 0.6 / 0.4)
        LEADRES_CONTACT_FIELDS_QUALIFY: Let identical phone/website qualify a pair (default: false)
        LEADRES_MERGE_STRATEGY: "transitive" or "first_match" (default: "transitive")
        LEADRES_ALGORITHM_VERSION: Version tag written on match rows (default: "1.0")
        LEADRES_PROGRESS_INTERVAL: Log progress every N accounts (default: 100)

    Example:
        settings = Settings()
        with SQLiteAccountStore(settings.database_path, settings.max_accounts) as store:
            DuplicateDetector.from_settings(settings, store).run()
    """

    database_path: str = "leads.db"
    max_accounts: int = Field(default=DEFAULT_MAX_ACCOUNTS, gt=0)

    name_match_threshold: float = Field(default=NAME_MATCH_THRESHOLD, ge=0.0, le=100.0)
    address_match_threshold: float = Field(default=ADDRESS_MATCH_THRESHOLD, ge=0.0, le=100.0)
    name_weight: float = Field(default=NAME_WEIGHT, ge=0.0, le=1.0)
    address_weight: float = Field(default=ADDRESS_WEIGHT, ge=0.0, le=1.0)
    contact_fields_qualify: bool = False
    merge_strategy: Literal["transitive", "first_match"] = "transitive"

    algorithm_version: str = ALGORITHM_VERSION
    progress_interval: int = Field(default=100, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="LEADRES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )
