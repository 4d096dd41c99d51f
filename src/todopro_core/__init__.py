"""TodoPro core - storage-agnostic todo repository with pluggable backends."""

__version__ = "0.1.0"
