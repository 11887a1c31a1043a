"""Storefront services: database facade, models, money helpers."""
