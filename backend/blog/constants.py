"""Post states and editor placeholders shared by models, lifecycle and views."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class PostStatus(models.TextChoices):
    """Draft posts are visible to their author only; published posts to everyone."""

    DRAFT = "draft", _("Draft")
    PUBLISHED = "published", _("Published")


PLACEHOLDER_TITLE = "Untitled Post"
PLACEHOLDER_CONTENT = "# Start writing..."
PLACEHOLDER_SLUG_PREFIX = "draft-"

# field names a save may touch; everything else is owned by the lifecycle
EDITABLE_FIELDS = (
    "title",
    "slug",
    "content",
    "excerpt",
    "featured_image",
    "seo_title",
    "seo_description",
    "seo_keywords",
    "canonical_url",
)
TEXT_FIELDS = ("title", "slug", "content", "excerpt", "seo_title", "seo_description")
