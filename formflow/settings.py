import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    # Only timeout in the system: connection attempts against the store.
    REDIS_CONNECT_TIMEOUT_SEC: float = float(os.getenv("REDIS_CONNECT_TIMEOUT_SEC", "2.0"))

    # Session positions expire on their own; every advance refreshes the TTL.
    SESSION_TTL_SEC: int = int(os.getenv("SESSION_TTL_SEC", "86400"))
    SESSION_KEY_PREFIX: str = os.getenv("SESSION_KEY_PREFIX", "session:")

    # Stored form documents (title, description, schema)
    FORM_KEY_PREFIX: str = os.getenv("FORM_KEY_PREFIX", "form:")
    FORM_CREATOR_KEY_PREFIX: str = os.getenv("FORM_CREATOR_KEY_PREFIX", "forms:creator:")
    DEFAULT_CREATOR_ADDRESS: str = os.getenv("DEFAULT_CREATOR_ADDRESS", "anonymous")

    # Rendering
    # Empty base keeps hrefs relative, which is what action clients expect.
    ACTIONS_BASE_URL: str = os.getenv("ACTIONS_BASE_URL", "").rstrip("/")
    ACTION_ICON_URL: str = os.getenv(
        "ACTION_ICON_URL",
        "https://via.placeholder.com/600x400/4F46E5/FFFFFF?text=BlinkForm",
    )

    # Auth
    API_KEY: str = os.getenv("API_KEY", "")
    ADMIN_RBAC_ENABLED: bool = os.getenv("ADMIN_RBAC_ENABLED", "true").lower() == "true"
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Participant answers never reach the logs in clear text unless disabled
    ENABLE_INPUT_REDACTION: bool = os.getenv("ENABLE_INPUT_REDACTION", "true").lower() == "true"

settings = Settings()
