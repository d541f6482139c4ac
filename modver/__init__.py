"""Classify Go module build versions and report how a build relates to its tags."""

__version__ = "0.3.0"
