from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os


class Settings(BaseSettings):
    APP_NAME: str = "SalonSuite"
    DEBUG: bool = False

    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/salonsuite.db")

    @property
    def DATABASE_URL(self) -> str:
        # Relative paths resolve against the backend directory, not the cwd
        db_path = self.DATABASE_PATH
        if not os.path.isabs(db_path):
            backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
            db_path = os.path.join(backend_dir, db_path)
        return f"sqlite:///{os.path.abspath(db_path)}"

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8765", "http://127.0.0.1:8765"]

    HOST: str = "127.0.0.1"
    PORT: int = 8765

    # GST slab applied at checkout (see core/gst_rates.py); 4 = GST 18%
    DEFAULT_GST_RATE_ID: int = 4
    INVOICE_PREFIX: str = "INV"
    BOOKING_PREFIX: str = "BK"
    GIFT_CARD_DEFAULT_EXPIRY_DAYS: int = 365

    # SMS configuration (via MessageBot API)
    SMS_ENABLED: bool = os.getenv("SMS_ENABLED", "false").lower() == "true"
    MESSAGEBOT_API_URL: str = "https://api.messagebot.in/v1/sms"
    MESSAGEBOT_API_TOKEN: str = os.getenv("MESSAGEBOT_API_TOKEN", "")
    MESSAGEBOT_SENDER_ID: str = os.getenv("MESSAGEBOT_SENDER_ID", "")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )


settings = Settings()
