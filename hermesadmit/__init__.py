"""Admission validation, cluster defaulting and workspace ConfigMap building for Hermes agent resources."""

__version__ = "0.1.0"