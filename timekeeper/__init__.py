"""Timekeeper - multi-tenant time tracking API."""
