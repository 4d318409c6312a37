import os
from dotenv import load_dotenv

load_dotenv()


def env_flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///craftlance.db")

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    BASE_URL = os.getenv("BASE_URL", "http://localhost:3000")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # SPWorlds payment gateway
    SPWORLDS_API_URL = os.getenv("SPWORLDS_API_URL", "https://spworlds.ru/api/public")
    SPWORLDS_ID = os.getenv("SPWORLDS_ID")
    SPWORLDS_TOKEN = os.getenv("SPWORLDS_TOKEN")
    PAYMENT_TIMEOUT = int(os.getenv("PAYMENT_TIMEOUT", 10))

    REJECT_COMPETING_OFFERS = env_flag("REJECT_COMPETING_OFFERS")

    RATELIMIT_ENABLED = env_flag("RATELIMIT_ENABLED", "true")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    API_RATE_LIMIT = os.getenv("API_RATE_LIMIT", "100 per 15 minutes")
    PAYMENT_RATE_LIMIT = os.getenv("PAYMENT_RATE_LIMIT", "10 per minute")


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    SPWORLDS_ID = "test-card"
    SPWORLDS_TOKEN = "test-token"
    BASE_URL = "http://testserver"
    RATELIMIT_ENABLED = False
    REJECT_COMPETING_OFFERS = False
    LOG_LEVEL = "DEBUG"


CONFIGS = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
