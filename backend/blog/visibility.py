# backend/blog/visibility.py
"""
Who may read which post.

A published post is readable by everyone. A draft is readable by its author
only. The same rule exists twice: as a per-object check and as an ORM filter,
so list endpoints never pull other authors' drafts out of the database.
"""
from django.db.models import Q

from .constants import PostStatus
from .models import Post


def is_authenticated(actor) -> bool:
    return bool(actor is not None and getattr(actor, "is_authenticated", False))


def is_visible(actor, post: Post) -> bool:
    if post.status == PostStatus.PUBLISHED:
        return True
    return is_authenticated(actor) and post.author_id == actor.pk


def visible_posts(actor, queryset=None):
    qs = Post.objects.all() if queryset is None else queryset
    condition = Q(status=PostStatus.PUBLISHED)
    if is_authenticated(actor):
        condition |= Q(author_id=actor.pk)
    return qs.filter(condition)


def authored_posts(actor, queryset=None):
    qs = Post.objects.all() if queryset is None else queryset
    if not is_authenticated(actor):
        return qs.none()
    return qs.filter(author_id=actor.pk)
