from atams import AtamsBaseSettings


class Settings(AtamsBaseSettings):
    """
    Application Settings

    Inherits from AtamsBaseSettings which includes:
    - DATABASE_URL (required)
    - DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_RECYCLE, DB_POOL_TIMEOUT, DB_POOL_PRE_PING
    - LOGGING_ENABLED, LOG_LEVEL, LOG_TO_FILE, LOG_FILE_PATH
    - CORS_ORIGINS, CORS_ALLOW_CREDENTIALS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS
    - DEBUG

    All settings can be overridden via .env file or by redefining them here.
    """
    APP_NAME: str = "Student Attendance"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Not used for authentication here, but required by AtamsBaseSettings
    ATLAS_APP_CODE: str = "STUDENT_ATTENDANCE"

    # Admin authentication (required, no defaults)
    ADMIN_USERNAME: str
    ADMIN_PASSWORD: str
    ADMIN_JWT_SECRET: str
    ADMIN_JWT_ALG: str = "HS256"
    ADMIN_TOKEN_EXPIRE_MINUTES: int = 480

    # Store timeouts
    DB_POOL_TIMEOUT: int = 5
    DB_CONNECT_TIMEOUT: int = 5
    DB_STATEMENT_TIMEOUT_MS: int = 5000

    # Scan debounce
    RECENT_SCAN_TTL_SECONDS: int = 5
    RECENT_SCAN_PURGE_INTERVAL: int = 60

    # Refresh feed
    EVENT_HISTORY_SIZE: int = 500


settings = Settings()
