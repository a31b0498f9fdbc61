"""Filesystem, location and subprocess primitives."""
