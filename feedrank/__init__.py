"""Personalized ranking engine for location, post and event feeds."""

__version__ = "0.1.0"
