import os
from dotenv import load_dotenv

load_dotenv()

POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
POSTGRES_DB = os.getenv("POSTGRES_DB", "supermarket_db")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")
POSTGRES_USER = os.getenv("POSTGRES_USER")

# Full SQLAlchemy URL wins over the POSTGRES_* parts (tests point this at SQLite)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)
REDIS_DB = int(os.getenv("REDIS_DB", "0"))

# "redis" or "memory"
SESSION_BACKEND = os.getenv("SESSION_BACKEND", "redis").lower()
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 24 * 60 * 60)))

STOREFRONT_HOST = os.getenv("STOREFRONT_HOST", "0.0.0.0")
STOREFRONT_PORT = int(os.getenv("STOREFRONT_PORT", "8080"))

STATIC_CATEGORIES = [
    c.strip()
    for c in os.getenv("STATIC_CATEGORIES", "Fruits,Vegetables,Drinks,Snacks,Others").split(",")
    if c.strip()
]

PASSWORD_MIN_LENGTH = 6
CONTACT_MIN_LENGTH = 8

# JWT Configuration
JWT_SECRET = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", "1440"))  # 24 hours default
