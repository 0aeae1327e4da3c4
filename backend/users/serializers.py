# backend/users/serializers.py
from rest_framework import serializers

from .models import Profile


class AuthorSerializer(serializers.ModelSerializer):
    """Profile fields shown next to a post in listings."""

    class Meta:
        model = Profile
        fields = ("username", "full_name", "avatar_url")
        read_only_fields = fields


class AuthorDetailSerializer(AuthorSerializer):
    class Meta(AuthorSerializer.Meta):
        fields = AuthorSerializer.Meta.fields + ("bio",)
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    id = serializers.CharField(source="supabase_uid", read_only=True)
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = Profile
        fields = ("id", "username", "full_name", "avatar_url", "bio", "display_name")
        read_only_fields = ("id", "display_name")
