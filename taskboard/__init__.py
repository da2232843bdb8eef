"""Taskboard API server."""
