"""Lune Billing Service."""
