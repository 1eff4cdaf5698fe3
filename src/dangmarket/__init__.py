"""Dang Market storefront."""
