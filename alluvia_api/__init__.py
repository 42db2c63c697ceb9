"""Alluvia renewal prediction API."""
