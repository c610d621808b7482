from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./users.db"
    ENVIRONMENT: str = "production"  # development | production | test
    LOG_LEVEL: str = "INFO"
    APP_VERSION: str = "1.0.0"
    CREATE_TABLES: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def debug(self) -> bool:
        # сырые сообщения и стек в ответах 500 только при разработке
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
