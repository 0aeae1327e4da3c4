# backend/users/admin.py
from django.contrib import admin

from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("username", "full_name", "user", "supabase_uid", "updated_at")
    search_fields = ("username", "full_name", "user__email", "supabase_uid")
    readonly_fields = ("supabase_uid", "created_at", "updated_at")
    raw_id_fields = ("user",)
