"""Tapo KLAP session cipher and protocol, and ADC reading averaging for light settings."""

__version__ = "0.1.0"