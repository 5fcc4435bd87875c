"""Storefront cart widget engine."""
