"""Telco expression matching, address transformation and dial-plan routing."""

__version__ = "0.1.0"
