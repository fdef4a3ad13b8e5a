"""Itinerary route optimization service."""
