"""Packing engines."""
