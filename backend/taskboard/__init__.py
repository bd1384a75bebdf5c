"""Taskboard backend: board state engine and its HTTP API."""
