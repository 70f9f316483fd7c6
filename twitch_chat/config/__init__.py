"""Configuration package exports."""

from .model import ClientSettings, Credentials

__all__ = ["ClientSettings", "Credentials"]
