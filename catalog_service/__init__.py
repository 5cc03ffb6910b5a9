"""Catalog service: products and categories with soft deletion."""
