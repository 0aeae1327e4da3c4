# backend/blog/admin.py
import logging

from django.contrib import admin, messages
from django.db import transaction
from django.utils import timezone

from .lifecycle import apply_defaults, mark_published, slug_available
from .models import Post

logger = logging.getLogger(__name__)


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "author", "status", "published_at", "updated_at")
    list_filter = ("status",)
    search_fields = ("title", "slug", "excerpt", "content", "seo_description")
    date_hierarchy = "updated_at"
    ordering = ("-updated_at",)
    readonly_fields = ("id", "author", "status", "published_at", "created_at", "updated_at")
    actions = ["publish_selected"]

    fieldsets = (
        (None, {"fields": ("id", "author", "title", "slug", "content", "excerpt", "featured_image")}),
        ("SEO", {"fields": ("seo_title", "seo_description", "seo_keywords", "canonical_url")}),
        ("Publication", {"fields": ("status", "published_at", "created_at", "updated_at")}),
    )

    def save_model(self, request, obj, form, change):
        stored_slug = Post.objects.filter(pk=obj.pk).values_list("slug", flat=True).first() if change else None
        explicit_slug = form is not None and "slug" in form.changed_data
        apply_defaults(obj, fallback_slug=stored_slug, explicit_slug=explicit_slug)
        if stored_slug and not slug_available(obj):
            # the title-derived slug belongs to another post
            obj.slug = stored_slug
        super().save_model(request, obj, form, change)

    def has_add_permission(self, request):
        # posts are created by their authors through the editor API
        return False

    @admin.action(description="Publish selected posts")
    def publish_selected(self, request, queryset):
        now = timezone.now()
        count = 0
        skipped = []
        with transaction.atomic():
            for post in queryset:
                apply_defaults(post)
                if not slug_available(post):
                    skipped.append(post.slug)
                    continue
                mark_published(post, now=now)
                post.save(update_fields=["status", "published_at", "slug", "seo_title", "updated_at"])
                count += 1
        logger.info("Admin %s published %s post(s)", request.user.pk, count)
        self.message_user(request, f"{count} post(s) published", messages.SUCCESS)
        if skipped:
            self.message_user(
                request,
                f"Skipped {len(skipped)} post(s), slug already in use: {', '.join(skipped)}",
                messages.WARNING,
            )
