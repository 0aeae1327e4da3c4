# backend/users/models.py
from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver


class Profile(models.Model):
    """
    Public author record joined onto posts (username, full name, avatar, bio).
    supabase_uid is the stable Supabase auth user id; it also prefixes the
    author's keys in the image bucket.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    supabase_uid = models.CharField(max_length=255, unique=True, blank=True, null=True)

    username = models.CharField(max_length=150, blank=True)
    full_name = models.CharField(max_length=255, blank=True)
    avatar_url = models.URLField(max_length=2048, blank=True)
    bio = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        return self.full_name or self.username or "Anonymous"

    @property
    def storage_prefix(self):
        return self.supabase_uid or str(self.user_id)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        Profile.objects.get_or_create(
            user=instance,
            defaults={"username": instance.get_username()},
        )
