import os
from dotenv import load_dotenv
from pathlib import Path

# Project root (the directory holding the maxfit package)
BASE_DIR = Path(__file__).resolve().parent.parent

dotenv_path = os.path.join(BASE_DIR, ".env")
load_dotenv(dotenv_path=dotenv_path)

# Auth
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))

# Database
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "maxfit")

# One-time codes
OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", "10"))
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY", "")
SENDER_EMAIL = os.getenv("SENDER_EMAIL", "")

# Vapi. The private key stays on the server; it is checked per request.
VAPI_PRIVATE_API_KEY = os.getenv("VAPI_PRIVATE_API_KEY", "")
VAPI_BASE_URL = os.getenv("VAPI_BASE_URL", "https://api.vapi.ai")
VAPI_WORKFLOW_ID = os.getenv("VAPI_WORKFLOW_ID", "")
VAPI_TIMEOUT_SECONDS = float(os.getenv("VAPI_TIMEOUT_SECONDS", "30"))

# AI call limits are switched off until plan enforcement ships
AI_CALL_LIMITS_ENABLED = os.getenv("AI_CALL_LIMITS_ENABLED", "false").lower() in ("1", "true", "yes")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
# Shared secret Vapi sends in x-vapi-secret on server webhooks; empty disables the check
VAPI_WEBHOOK_SECRET = os.getenv("VAPI_WEBHOOK_SECRET", "")
