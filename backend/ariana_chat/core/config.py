from pathlib import Path

from pydantic_settings import BaseSettings

WELCOME_MESSAGE = """ Hello! I'm Ariana, your AI business coach — here to support you in growing your startup with clarity and confidence.
Whether you're working on sales, marketing, finance, or overall strategy, I've got you covered."""


class Settings(BaseSettings):
    app_name: str = "Ariana Chat"
    debug: bool = False

    # Paths
    data_dir: Path = Path(__file__).resolve().parent.parent.parent / "data"
    db_path: Path = Path(__file__).resolve().parent.parent.parent / "ariana.db"

    # Local storage
    storage_backend: str = "sqlite"  # sqlite | file | memory
    storage_key: str = "chatStorage"
    storage_file: Path = Path(__file__).resolve().parent.parent.parent / "data" / "local_storage.json"

    # Remote conversation service
    prediction_url: str = (
        "https://flowise-pkan.onrender.com/api/v1/prediction/e24e29cd-0bb7-4b2e-ae6e-32dcaf3799f9"
    )
    request_timeout: float | None = None  # None leaves the transport without a timeout

    # Conversation
    welcome_message: str = WELCOME_MESSAGE
    error_reply: str = "Sorry, I encountered an error. Please try again later."

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    model_config = {
        "env_file": str(Path(__file__).resolve().parent.parent.parent / ".env"),
        "env_prefix": "ARIANA_",
    }


settings = Settings()
