from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LOCALWALLET_")

    app_name: str = "LocalWallet"
    debug: bool = False

    database_url: str = "sqlite:///./localwallet.db"

    # Name of the single durable slot holding the whole card collection
    storage_key: str = "LOCAL_WALLET_CARDS"

    # Best-effort logo lookup during card creation
    # When False, cards are created with logo_url=None and no network access
    logo_lookup_enabled: bool = True
    logo_service_url: str = "https://logo.clearbit.com"
    logo_probe_timeout: float = 2.0
    logo_favicon_fallback: bool = False


settings = Settings()


# =============================================================================
# LOGO LOOKUP
# =============================================================================

# Candidate top-level domains probed in order for a store's logo
LOGO_CANDIDATE_TLDS = ("com", "nl", "de", "co.uk")

FAVICON_SERVICE_URL = "https://www.google.com/s2/favicons"
