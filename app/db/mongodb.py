"""
MongoDB Connection Utility

MongoDB stores the binary media of the platform through GridFS:
- Profile avatars
- Certificate images
- Project (proof-of-work) screenshots

WHY GridFS for these?
- Files are addressed by an object key under a per-user prefix
- Large binaries stay out of the relational tables
- The relational rows only keep the public URL and the object key
"""
import structlog
from gridfs import GridFSBucket
from pymongo import MongoClient
from pymongo.database import Database

from app.core.config import get_settings

settings = get_settings()
logger = structlog.get_logger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the media database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_media_bucket() -> GridFSBucket:
    """GridFS bucket holding every uploaded object."""
    return GridFSBucket(get_mongo_db(), bucket_name=settings.media_bucket)


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("mongodb_connection_failed", error=str(e))
        return False


def init_mongo_indexes():
    """
    Create indexes for media lookups.
    Call this once during app startup.
    """
    db = get_mongo_db()

    # Objects are fetched by key (GridFS filename) and listed per owner
    files = db[f"{settings.media_bucket}.files"]
    files.create_index("filename")
    files.create_index("metadata.owner_id")

    logger.info("mongodb_indexes_ready", bucket=settings.media_bucket)
