# backend/blog/serializers.py
from rest_framework import serializers

from users.serializers import AuthorSerializer, AuthorDetailSerializer

from .constants import PostStatus
from .models import Post
from .utils import META_DESCRIPTION_LENGTH, describe_meta, parse_keywords


def _profile(post):
    # author rows always get a profile from the post_save signal; guard older rows anyway
    return getattr(post.author, "profile", None) if post.author_id else None


class KeywordsField(serializers.Field):
    """Accepts "a, b, c" or ["a", "b"]; stores a trimmed, deduplicated list."""

    default_error_messages = {
        "invalid": "Expected a comma separated string or a list of strings.",
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            return parse_keywords(data)
        if isinstance(data, (list, tuple)) and all(isinstance(item, str) for item in data):
            return parse_keywords(data)
        self.fail("invalid")

    def to_representation(self, value):
        return list(value or [])


class PostListSerializer(serializers.ModelSerializer):
    excerpt = serializers.CharField(source="display_excerpt", read_only=True)
    author = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = ("id", "title", "slug", "excerpt", "featured_image", "published_at", "author_id", "author")

    def get_author(self, obj):
        profile = _profile(obj)
        return AuthorSerializer(profile).data if profile else None


class PostDetailSerializer(serializers.ModelSerializer):
    author = serializers.SerializerMethodField()
    excerpt = serializers.CharField(source="display_excerpt", read_only=True)
    seo_keywords = KeywordsField(read_only=True)
    meta = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = (
            "id", "title", "slug", "excerpt", "content", "featured_image", "status",
            "seo_title", "seo_description", "seo_keywords", "canonical_url",
            "published_at", "created_at", "updated_at", "reading_time", "author_id", "author", "meta",
        )

    def get_author(self, obj):
        profile = _profile(obj)
        return AuthorDetailSerializer(profile).data if profile else None

    def get_meta(self, obj):
        return describe_meta(obj)


class DashboardPostSerializer(serializers.ModelSerializer):
    class Meta:
        model = Post
        fields = ("id", "title", "slug", "status", "created_at", "updated_at", "published_at")


class PostEditorSerializer(serializers.ModelSerializer):
    """Full record as the editor loads it (explicit excerpt only, no derived one)."""
    seo_keywords = KeywordsField(read_only=True)

    class Meta:
        model = Post
        fields = (
            "id", "author_id", "title", "slug", "content", "excerpt", "featured_image", "status",
            "seo_title", "seo_description", "seo_keywords", "canonical_url",
            "published_at", "created_at", "updated_at",
        )
        read_only_fields = fields


class PostUpdateSerializer(serializers.Serializer):
    """
    Input surface of the editor. Length caps live here; slug/SEO defaults and
    the publish rule are applied by blog.lifecycle.save_post.
    """
    title = serializers.CharField(max_length=255, allow_blank=True, required=False, trim_whitespace=False)
    slug = serializers.CharField(max_length=300, allow_blank=True, required=False)
    content = serializers.CharField(allow_blank=True, required=False, trim_whitespace=False)
    excerpt = serializers.CharField(allow_blank=True, required=False)
    featured_image = serializers.URLField(max_length=2048, allow_blank=True, allow_null=True, required=False)
    seo_title = serializers.CharField(max_length=255, allow_blank=True, required=False)
    seo_description = serializers.CharField(max_length=META_DESCRIPTION_LENGTH, allow_blank=True, required=False)
    seo_keywords = KeywordsField(required=False)
    canonical_url = serializers.URLField(max_length=2048, allow_blank=True, required=False)
    publish = serializers.ChoiceField(choices=[(PostStatus.PUBLISHED.value, PostStatus.PUBLISHED.label)], allow_null=True, required=False)

    def split(self):
        data = dict(self.validated_data)
        publish = data.pop("publish", None)
        return data, publish
