import logging
from pymongo import MongoClient, ASCENDING, IndexModel
import certifi

from maxfit.config import MONGO_URI, DB_NAME

logger = logging.getLogger(__name__)

# Atlas (mongodb+srv) needs the certifi bundle; local servers run without TLS
if MONGO_URI.startswith("mongodb+srv://"):
    client = MongoClient(MONGO_URI, tlsCAFile=certifi.where())
else:
    client = MongoClient(MONGO_URI)

db = client[DB_NAME]

users_collection = db["users"]
otp_verifications_collection = db["otp_verifications"]


def ensure_indexes():
    """Create the indexes the stores rely on. Safe to call on every startup."""
    # Account uniqueness lives here, not in a pre-check
    users_collection.create_indexes([
        IndexModel([("email", ASCENDING)], unique=True, name="email_unique"),
    ])
    otp_verifications_collection.create_indexes([
        IndexModel([("email", ASCENDING), ("otp", ASCENDING)], name="email_otp"),
        IndexModel([("expiresAt", ASCENDING)], name="expires_at"),
    ])
    logger.info("✅ MongoDB indexes ensured on %s", DB_NAME)


def ping():
    client.admin.command("ping")
