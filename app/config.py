from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "ESignDemo"
    session_ttl_seconds: int = 3600  # 1 hour, sliding
    # Uploaded files are kept inline as a data URL, so cap them hard.
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    default_document_title: str = "Untitled Document"
    seed_demo_data: bool = True
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]

    @property
    def db_path(self) -> Path:
        return self.data_path / "db.sqlite"

    model_config = {"env_prefix": "ESIGN_"}


settings = Settings()
