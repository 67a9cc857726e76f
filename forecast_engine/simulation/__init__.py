"""Synthetic data for demos and tests."""

from .generator import SnapshotGenerator

__all__ = ['SnapshotGenerator']
