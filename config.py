from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    store_url: str = Field("http://localhost:54321", description="Base URL of the managed backend")
    store_key: str = Field("", description="API key sent as apikey and bearer token")
    store_table: str = "MyinventoryDB"
    store_timeout: float = 30.0

    app_title: str = "Quantify Pro"
    log_level: str = "INFO"

    # Inherited behaviour: a failed create/update still clears the form.
    clear_session_on_store_error: bool = True
    reject_negative_values: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
