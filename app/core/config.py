from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    url: str = Field(default="sqlite:///flashlearner.db", alias="STORAGE_URL")
    categories_key: str = Field(default="fl_categories", alias="STORAGE_CATEGORIES_KEY")
    flashcards_key: str = Field(default="fl_cards", alias="STORAGE_FLASHCARDS_KEY")
    user_key: str = Field(default="fl_user", alias="STORAGE_USER_KEY")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="flashlearner", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"

    @computed_field
    def is_testing(self) -> bool:
        return self.mode == "test"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    storage: StorageSettings = Field(default_factory=lambda: StorageSettings())

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")

    # Gemini models for the A2Z sync batch and the tutor chat
    sync_model: str = Field(default="gemini-2.5-flash", alias="SYNC_MODEL")
    tutor_model: str = Field(default="gemini-2.5-flash", alias="TUTOR_MODEL")
    sync_batch_size: int = Field(default=6, alias="SYNC_BATCH_SIZE")


settings = Settings()
