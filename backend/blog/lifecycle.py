# backend/blog/lifecycle.py
"""
Post lifecycle: create -> edit -> save / publish.

Every operation receives the acting user explicitly. Defaults (slug, SEO title)
and the set-once published_at rule are applied here, right before the write,
so the stored record is always complete whatever the client sent.
"""
import logging
import re
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from .constants import (
    EDITABLE_FIELDS,
    PLACEHOLDER_CONTENT,
    PLACEHOLDER_SLUG_PREFIX,
    PLACEHOLDER_TITLE,
    TEXT_FIELDS,
    PostStatus,
)
from .exceptions import AuthError, NotFoundError, PersistenceError, ValidationError
from .models import Post
from .utils import generate_slug, parse_keywords
from .visibility import is_authenticated

logger = logging.getLogger(__name__)

_PLACEHOLDER_SLUG_RE = re.compile(rf"^{re.escape(PLACEHOLDER_SLUG_PREFIX)}\d+(-[0-9a-f]{{6}})?$")


def _require_actor(actor):
    if not is_authenticated(actor):
        raise AuthError("Sign in to manage posts")


def _placeholder_slug() -> str:
    slug = f"{PLACEHOLDER_SLUG_PREFIX}{int(time.time() * 1000)}"
    if Post.objects.filter(slug=slug).exists():
        # two drafts within the same millisecond
        slug = f"{slug}-{uuid.uuid4().hex[:6]}"
    return slug


def _load_own_post(actor, post_id) -> Post:
    try:
        return Post.objects.get(pk=post_id, author_id=actor.pk)
    except (Post.DoesNotExist, DjangoValidationError, ValueError):
        # other authors' posts are reported as missing, not forbidden
        raise NotFoundError(f"Post {post_id} not found")


def clean_fields(fields) -> Dict[str, Any]:
    """
    Validates a partial update and returns it normalized:
    text fields are strings, keywords are a deduplicated list,
    an explicit slug is passed through generate_slug.
    """
    if not isinstance(fields, Mapping):
        raise ValidationError("Post fields must be a mapping")

    unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown or read-only field(s): {', '.join(unknown)}")

    cleaned = {}
    for name, value in fields.items():
        if name in TEXT_FIELDS:
            if value is None:
                value = ''
            if not isinstance(value, str):
                raise ValidationError(f"{name} must be a string")
            if name == 'slug':
                value = generate_slug(value)
        elif name == 'seo_keywords':
            if value is not None and not isinstance(value, (str, list, tuple)):
                raise ValidationError("seo_keywords must be a list or a comma separated string")
            value = parse_keywords(value)
        elif name in ('featured_image', 'canonical_url'):
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{name} must be a URL string")
            if name == 'featured_image':
                value = value or None
            else:
                value = value or ''
        cleaned[name] = value
    return cleaned


def is_placeholder_slug(slug) -> bool:
    return bool(_PLACEHOLDER_SLUG_RE.match(slug or ''))


def apply_defaults(post: Post, fallback_slug: Optional[str] = None, explicit_slug: bool = False) -> Post:
    if not explicit_slug and is_placeholder_slug(post.slug) and post.title and post.title != PLACEHOLDER_TITLE:
        # the draft got a real title; its creation-time slug gives way
        post.slug = ''
    if not post.slug:
        post.slug = generate_slug(post.title) or fallback_slug or ''
    if not post.seo_title or post.seo_title == PLACEHOLDER_TITLE:
        post.seo_title = post.title
    return post


def mark_published(post: Post, now=None) -> Post:
    post.status = PostStatus.PUBLISHED
    if post.published_at is None:
        post.published_at = now or timezone.now()
    return post


def slug_available(post: Post) -> bool:
    return not Post.objects.filter(slug=post.slug).exclude(pk=post.pk).exists()


def _ensure_slug_available(post: Post):
    if not post.slug:
        raise ValidationError("Post needs a title or a slug")
    if not slug_available(post):
        raise ValidationError(f"Slug '{post.slug}' is already in use")


def create_post(actor) -> Post:
    _require_actor(actor)
    try:
        with transaction.atomic():
            post = Post.objects.create(
                author=actor,
                title=PLACEHOLDER_TITLE,
                slug=_placeholder_slug(),
                content=PLACEHOLDER_CONTENT,
                status=PostStatus.DRAFT,
            )
    except DatabaseError as exc:
        logger.exception("create_post failed for user=%s", actor.pk)
        raise PersistenceError("Failed to create post") from exc
    logger.info("Draft %s created by user=%s", post.pk, actor.pk)
    return post


def get_post_for_edit(actor, post_id) -> Post:
    _require_actor(actor)
    return _load_own_post(actor, post_id)


def save_post(actor, post_id, fields=None, publish: Optional[str] = None) -> Post:
    """
    Applies `fields` to the actor's post, fills slug / seo_title defaults and,
    with publish="published", publishes it (published_at is only ever set once).
    Returns the record as re-read from the database.
    """
    _require_actor(actor)
    if publish not in (None, PostStatus.PUBLISHED):
        raise ValidationError(f"Unsupported publish status: {publish!r}")
    cleaned = clean_fields(fields or {})

    try:
        with transaction.atomic():
            post = _load_own_post(actor, post_id)
            stored_slug, stored_title = post.slug, post.title
            for name, value in cleaned.items():
                setattr(post, name, value)
            # once a post has a real title its slug was chosen, not generated
            explicit_slug = "slug" in cleaned or stored_title != PLACEHOLDER_TITLE
            apply_defaults(post, fallback_slug=stored_slug, explicit_slug=explicit_slug)
            if publish == PostStatus.PUBLISHED:
                mark_published(post)
            _ensure_slug_available(post)
            post.save()
    except DatabaseError as exc:
        logger.exception("save_post failed for post=%s", post_id)
        raise PersistenceError("Failed to save post") from exc

    if publish == PostStatus.PUBLISHED:
        logger.info("Post %s published (published_at=%s)", post.pk, post.published_at)
    post.refresh_from_db()
    return post


def publish_post(actor, post_id, fields=None) -> Post:
    return save_post(actor, post_id, fields, publish=PostStatus.PUBLISHED)


@dataclass
class PostDraft:
    """
    Staged edits for one post, kept apart from the confirmed record.
    Nothing reaches the database until commit(); a failed commit leaves the
    staged values in place for a retry.
    """
    post_id: Any
    values: Dict[str, Any] = field(default_factory=dict)
    changes: Set[str] = field(default_factory=set)

    @classmethod
    def from_post(cls, post: Post) -> "PostDraft":
        values = {name: getattr(post, name) for name in EDITABLE_FIELDS}
        values['seo_keywords'] = list(values['seo_keywords'] or [])
        return cls(post_id=post.pk, values=values)

    def update(self, **fields) -> "PostDraft":
        cleaned = clean_fields(fields)
        self.values.update(cleaned)
        self.changes.update(cleaned)
        return self

    @property
    def is_dirty(self) -> bool:
        return bool(self.changes)

    def staged(self) -> Dict[str, Any]:
        return {name: self.values[name] for name in self.changes}

    def commit(self, actor, publish: Optional[str] = None) -> Post:
        post = save_post(actor, self.post_id, self.staged(), publish=publish)
        self.values = PostDraft.from_post(post).values
        self.changes.clear()
        return post
