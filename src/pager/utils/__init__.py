"""Utility helpers for pager."""
