# backend/blog/images.py
"""
Featured image attach / detach.

attach_image uploads and hands back the public URL; the caller stores it
through lifecycle.save_post. detach_image clears the field and deletes the
blob in one transaction, so a failed delete leaves the post untouched.
"""
import io
import logging
import mimetypes
import os
import re
import time
from typing import Optional
from urllib.parse import unquote, urlparse

from django.conf import settings
from django.db import DatabaseError, transaction
from PIL import Image, UnidentifiedImageError

from .exceptions import BlobNotFound, PersistenceError, UploadError
from .lifecycle import get_post_for_edit
from .storages import get_blob_store

logger = logging.getLogger(__name__)

PUBLIC_PATH_RE = re.compile(r"/storage/v1/object/public/(?P<bucket>[^/]+)/(?P<key>.+)$")
ALLOWED_MIME_PREFIXES = ("image/",)


def max_upload_size() -> int:
    return int(getattr(settings, "BLOG_IMAGE_MAX_UPLOAD_SIZE", 5 * 1024 * 1024))


def storage_prefix(actor) -> str:
    profile = getattr(actor, "profile", None)
    if profile is not None and profile.supabase_uid:
        return profile.supabase_uid
    return str(actor.pk)


def storage_key_from_url(url: str, bucket: Optional[str] = None) -> Optional[str]:
    """
    ".../storage/v1/object/public/<bucket>/<key>" -> "<key>".
    None for anything else (external URLs, other buckets).
    """
    if not url:
        return None
    match = PUBLIC_PATH_RE.search(urlparse(url).path)
    if not match:
        return None
    if bucket and match.group("bucket") != bucket:
        return None
    return unquote(match.group("key"))


def _read_image(upload):
    name = getattr(upload, "name", "") or ""
    size = getattr(upload, "size", None)
    if size is not None and size > max_upload_size():
        raise UploadError("File too large")

    content_type = getattr(upload, "content_type", None) or mimetypes.guess_type(name)[0] or ""
    if not any(content_type.startswith(p) for p in ALLOWED_MIME_PREFIXES):
        raise UploadError("Unsupported file type")

    data = upload.read()
    if len(data) > max_upload_size():
        raise UploadError("File too large")
    try:
        with Image.open(io.BytesIO(data)) as im:
            image_format = (im.format or "").lower()
            im.verify()
    except (UnidentifiedImageError, OSError) as e:
        raise UploadError("File is not a valid image") from e

    ext = os.path.splitext(name)[1].lower().lstrip(".") or image_format or "jpg"
    return data, ext, content_type


def attach_image(actor, post_id, upload, blob_store=None) -> str:
    post = get_post_for_edit(actor, post_id)
    data, ext, content_type = _read_image(upload)

    store = blob_store or get_blob_store()
    key = f"{storage_prefix(actor)}/{int(time.time() * 1000)}.{ext}"
    store.upload(key, data, content_type)
    url = store.get_public_url(key)
    logger.info("Uploaded featured image for post=%s key=%s", post.pk, key)
    return url


def _own_key(actor, url, store) -> Optional[str]:
    key = storage_key_from_url(url, getattr(store, "bucket", None))
    if key and not key.startswith(storage_prefix(actor) + "/"):
        logger.debug("Image key %s is outside the author's prefix; not deleting", key)
        return None
    return key


def remove_image_blob(actor, url, blob_store=None) -> bool:
    """
    Best-effort delete of a blob that no post references any more
    (the previous image after a replace). Returns True when a delete was issued.
    """
    store = blob_store or get_blob_store()
    key = _own_key(actor, url, store)
    if not key:
        return False
    try:
        store.remove([key])
    except BlobNotFound:
        pass
    return True


def detach_image(actor, post_id, blob_store=None) -> None:
    post = get_post_for_edit(actor, post_id)
    if not post.featured_image:
        return

    store = blob_store or get_blob_store()
    key = _own_key(actor, post.featured_image, store)
    try:
        with transaction.atomic():
            post.featured_image = None
            post.save(update_fields=["featured_image", "updated_at"])
            if key:
                try:
                    store.remove([key])
                except BlobNotFound:
                    logger.info("Blob %s already gone; clearing field only", key)
    except DatabaseError as exc:
        logger.exception("detach_image failed for post=%s", post_id)
        raise PersistenceError("Failed to clear featured image") from exc
    logger.info("Detached featured image from post=%s (deleted key=%s)", post.pk, key)
