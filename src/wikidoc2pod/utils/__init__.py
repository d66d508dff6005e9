"""Utility helpers for wikidoc2pod."""
