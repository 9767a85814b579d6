from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from the process + optionally from files
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    APP_NAME: str = Field(default="ledger_reports", validation_alias=AliasChoices("APP_NAME", "app_name"))
    ENVIRONMENT: str = Field(default="dev", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # Document store collections
    TRANSACTIONS_COLLECTION: str = Field(
        default="transactions",
        validation_alias=AliasChoices("TRANSACTIONS_COLLECTION", "transactions_collection"),
    )
    ACCOUNTS_COLLECTION: str = Field(
        default="accounts",
        validation_alias=AliasChoices("ACCOUNTS_COLLECTION", "accounts_collection"),
    )


settings = Settings()
