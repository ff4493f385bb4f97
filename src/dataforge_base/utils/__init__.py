"""Utility helpers shared by the database layer."""
