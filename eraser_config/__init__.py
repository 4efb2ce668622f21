"""Configuration and resource models for a cluster image-cleanup controller."""

__version__ = "1.4.0b0"