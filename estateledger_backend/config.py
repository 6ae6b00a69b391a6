import os
from datetime import timedelta
from decimal import Decimal


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    # Secret key for sessions / JWT - REQUIRED outside testing
    SECRET_KEY = os.environ.get("SECRET_KEY")

    # Database connection - REQUIRED outside testing
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT is carried in an HTTP-only cookie named "token"; headers work too
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_TOKEN_LOCATION = ["cookies", "headers"]
    JWT_ACCESS_COOKIE_NAME = "token"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)
    JWT_COOKIE_SECURE = _env_bool("JWT_COOKIE_SECURE", "true")
    JWT_COOKIE_SAMESITE = "Strict"
    JWT_COOKIE_CSRF_PROTECT = _env_bool("JWT_COOKIE_CSRF_PROTECT", "false")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    API_PREFIX = "/api"

    # Billing
    SERVICE_CHARGE_AMOUNT = Decimal(os.environ.get("SERVICE_CHARGE_AMOUNT", "500"))
    SECURITY_CHARGE_AMOUNT = Decimal(os.environ.get("SECURITY_CHARGE_AMOUNT", "1000"))
    RENT_OVERDUE_AFTER_DAYS = int(os.environ.get("RENT_OVERDUE_AFTER_DAYS", "30"))
    # OVERDUE rent bills are left out of verification unless this is set
    RECONCILE_INCLUDE_OVERDUE = _env_bool("RECONCILE_INCLUDE_OVERDUE")


class DevelopmentConfig(Config):
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///estateledger_dev.db")
    JWT_COOKIE_SECURE = False


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-0123456789"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_CSRF_PROTECT = False
    RECONCILE_INCLUDE_OVERDUE = False
