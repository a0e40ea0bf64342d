"""Zip package access."""

from .package_store import PackageStore

__all__ = ["PackageStore"]
