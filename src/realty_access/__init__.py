"""Role- and capability-based access control for the realty admin API."""

__version__ = "0.1.0"
