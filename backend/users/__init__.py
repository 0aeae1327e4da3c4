# backend/users/__init__.py
"""
Authors: the profile record joined onto posts and the Supabase session bridge.

Models are not imported here: importing them at package level runs before the
app registry is ready (AppRegistryNotReady).
"""

__all__ = []
