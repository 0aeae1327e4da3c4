# backend/blog/models.py
import uuid

from django.conf import settings
from django.db import models

from .constants import PostStatus
from .utils import derive_excerpt


class PostQuerySet(models.QuerySet):
    def published(self):
        return self.filter(status=PostStatus.PUBLISHED)

    def with_author(self):
        return self.select_related('author', 'author__profile')


class Post(models.Model):
    """
    Markdown blog post. Slug / SEO defaults and the published_at rule are applied
    by blog.lifecycle before every write, not here.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='posts',
        editable=False,
    )
    title = models.CharField(max_length=255, blank=True)
    slug = models.SlugField(max_length=300, unique=True, db_index=True)
    content = models.TextField(blank=True)  # Markdown source
    excerpt = models.TextField(blank=True)
    featured_image = models.URLField(max_length=2048, blank=True, null=True)

    # SEO / metadata
    seo_title = models.CharField(max_length=255, blank=True)
    seo_description = models.CharField(max_length=320, blank=True)
    seo_keywords = models.JSONField(default=list, blank=True)
    canonical_url = models.URLField(max_length=2048, blank=True)

    status = models.CharField(max_length=20, choices=PostStatus.choices, default=PostStatus.DRAFT, db_index=True)
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['status', 'published_at'], name='blog_post_status_pub_idx'),
            models.Index(fields=['author', 'updated_at'], name='blog_post_author_upd_idx'),
        ]

    def __str__(self):
        return f"{self.title or self.slug} ({self.get_status_display()})"

    @property
    def is_published(self):
        return self.status == PostStatus.PUBLISHED

    @property
    def display_excerpt(self):
        return self.excerpt or derive_excerpt(self.content)

    @property
    def reading_time(self):
        word_count = len((self.content or '').split())
        return max(1, round(word_count / 200))
