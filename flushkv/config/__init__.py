"""Configuration module for flushkv."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
