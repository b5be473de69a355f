"""Adapters: subprocess, HTTP, Docker and file-format details."""
