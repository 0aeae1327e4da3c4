# backend/blog/storages.py
import logging
from typing import Iterable, List

from django.conf import settings
from django.utils.module_loading import import_string
from supabase import create_client

from .exceptions import BlobNotFound, DeletionError, UploadError

logger = logging.getLogger(__name__)


class BlobStore:
    """
    Object storage used for featured images.
    Keys are bucket-relative paths such as "<user uid>/<timestamp>.png".
    """
    bucket = None

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        raise NotImplementedError

    def get_public_url(self, key: str) -> str:
        raise NotImplementedError

    def remove(self, keys: Iterable[str]) -> None:
        raise NotImplementedError


def _is_not_found(exc) -> bool:
    # storage3 puts the REST error body in args[0] / attributes, depending on version
    for attr in ("status", "statusCode", "code"):
        value = getattr(exc, attr, None)
        if value is not None and str(value) in ("404", "not_found", "NoSuchKey"):
            return True
    if exc.args and isinstance(exc.args[0], dict):
        body = exc.args[0]
        if str(body.get("statusCode") or body.get("status") or "") == "404":
            return True
        if str(body.get("error", "")).lower() in ("not_found", "not found", "nosuchkey"):
            return True
    return "not found" in str(exc).lower()


class SupabaseBlobStore(BlobStore):
    """
    Supabase Storage through the supabase python client:
    storage.from_(bucket).upload / get_public_url / remove.
    """

    def __init__(self, url=None, key=None, bucket=None):
        self.url = url or settings.SUPABASE_URL
        self.key = key or settings.SUPABASE_SERVICE_ROLE_KEY or settings.SUPABASE_KEY
        self.bucket = bucket or settings.SUPABASE_BUCKET
        self._client = None

    def client(self):
        if self._client is None:
            if not self.url or not self.key:
                raise RuntimeError("Supabase storage not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.")
            self._client = create_client(self.url, self.key)
        return self._client

    def _bucket(self):
        return self.client().storage.from_(self.bucket)

    def upload(self, key, data, content_type):
        bucket = self._bucket()
        try:
            bucket.upload(
                key,
                bytes(data),
                {"content-type": content_type, "cache-control": "86400", "upsert": "false"},
            )
        except Exception as e:
            logger.warning("Supabase upload failed for %s: %s", key, e)
            raise UploadError(f"Supabase upload error: {e}") from e

    def get_public_url(self, key):
        public_url = self._bucket().get_public_url(key)
        # older clients return {"publicURL": ...}
        if isinstance(public_url, dict):
            return public_url.get("publicURL") or public_url.get("publicUrl") or (public_url.get("data") or {}).get("publicUrl")
        return public_url

    def remove(self, keys):
        keys: List[str] = list(keys)
        bucket = self._bucket()
        try:
            res = bucket.remove(keys)
        except Exception as e:
            if _is_not_found(e):
                raise BlobNotFound(str(e)) from e
            logger.warning("Supabase delete error for %s: %s", keys, e)
            raise DeletionError(f"Supabase delete error: {e}") from e
        if isinstance(res, dict) and res.get("error"):
            if _is_not_found(Exception(res["error"])):
                raise BlobNotFound(str(res["error"]))
            raise DeletionError(f"Supabase delete error: {res['error']}")


def get_blob_store() -> BlobStore:
    store_class = import_string(getattr(settings, "BLOG_BLOB_STORE", "blog.storages.SupabaseBlobStore"))
    return store_class()
