from dotenv import load_dotenv
import logging
import os

# Load .env file
load_dotenv(dotenv_path=".env")


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL")

    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "7"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


settings = Settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

if settings.DATABASE_URL is None:
    raise Exception("DATABASE_URL not found. Check your .env file location.")

if settings.JWT_SECRET is None:
    raise Exception("JWT_SECRET not found. Check your .env file location.")
