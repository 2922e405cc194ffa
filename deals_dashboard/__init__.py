"""Deals Dashboard - filter, search, sort and aggregate sponsorship deals."""

__version__ = "0.1.0"
