"""Supabase access for companies, bandi and matches."""

from .client import SupabaseClient

__all__ = ["SupabaseClient"]
