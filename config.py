import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./signature.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    EXPOSE_INTERNAL_ERRORS = bool(data.get("EXPOSE_INTERNAL_ERRORS", 1))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    HTTP_TIMEOUT_SECONDS = float(data.get("HTTP_TIMEOUT_SECONDS", 10))
    WHATSAPP_GRAPH_API_URL = data.get(
        "WHATSAPP_GRAPH_API_URL", "https://graph.facebook.com/v18.0"
    )
    TWILIO_API_URL = data.get("TWILIO_API_URL", "https://api.twilio.com/2010-04-01")
