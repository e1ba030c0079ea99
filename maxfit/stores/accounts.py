"""Account store: the ``users`` collection."""

import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo import errors as mongo_errors

from maxfit import db
from maxfit.errors import AccountExistsError
from maxfit.models.user import AccountInDB

logger = logging.getLogger(__name__)


def find_by_email(email: str) -> Optional[dict]:
    return db.users_collection.find_one({"email": email})


def find_by_id(user_id: str) -> Optional[dict]:
    try:
        oid = ObjectId(user_id)
    except (InvalidId, TypeError):
        return None
    return db.users_collection.find_one({"_id": oid})


def create_account(account: AccountInDB) -> dict:
    """Insert a new account. The unique email index makes this create-if-absent.

    Raises:
        AccountExistsError: an account with this email is already stored.
    """
    doc = account.model_dump()
    try:
        result = db.users_collection.insert_one(doc)
    except mongo_errors.DuplicateKeyError:
        logger.info("Account insert rejected, email already registered")
        raise AccountExistsError()
    doc["_id"] = result.inserted_id
    return doc


def increment_ai_calls(email: str) -> Optional[dict]:
    return db.users_collection.find_one_and_update(
        {"email": email},
        {"$inc": {"aiCallsUsed": 1}, "$set": {"updatedAt": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
