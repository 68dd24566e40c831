"""Bundled template packages; each subdirectory is one package."""
