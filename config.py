import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_TTL_MINUTES = int(data.get("ACCESS_TOKEN_TTL_MINUTES", 15))
    # "memory" keeps a per-process TTL cache, "none" reads the store on every check
    ACCESS_CACHE_BACKEND = data.get("ACCESS_CACHE_BACKEND", "memory")
    ACCESS_CACHE_TTL_SECONDS = int(data.get("ACCESS_CACHE_TTL_SECONDS", 300))
    ACCESS_CACHE_MAX_SIZE = int(data.get("ACCESS_CACHE_MAX_SIZE", 10000))
    INVITATION_TTL_DAYS = int(data.get("INVITATION_TTL_DAYS", 7))
    # Seed permissions/system roles and backfill legacy memberships at startup
    BOOTSTRAP_ON_STARTUP = bool(data.get("BOOTSTRAP_ON_STARTUP", True))
