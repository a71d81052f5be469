from typing import List, Optional

from pydantic import field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .secrets_manager import SecretsManager

class Settings(BaseSettings):
    aws_region: str = "us-east-1"
    environment: str = "development"
    host: str = "localhost"
    db_username: str = "postgres"
    db_password: SecretStr = SecretStr("")
    database: str = "relations"
    port: int = 5432
    # Full SQLAlchemy URL; takes precedence over the host/port/credential fields
    database_url: Optional[str] = None
    log_level: str = "INFO"
    dev_user_id: str = "dev-user"
    firebase_project_id: Optional[str] = None
    cors_origins: List[str] = ["*"]
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("db_username", "db_password", mode="before")
    @classmethod
    def load_secrets(cls, v, info):
        if info.data.get("environment") == "production":
            try:
                secrets = SecretsManager(region_name=info.data.get("aws_region"))
                if info.field_name == "db_username":
                    v = secrets.get_db_credentials()['username']
                elif info.field_name == "db_password":
                    v = secrets.get_db_credentials()['password']
                return v
            except Exception:
                # If there's an error getting secrets, fall back to the env value
                return v
        return v

    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"postgresql+psycopg://{self.db_username}:{self.db_password.get_secret_value()}@{self.host}:{self.port}/{self.database}"

settings = Settings()
