"""Shared pytest setup"""
import os
import tempfile

# Keep rotated log files out of the working tree during test runs
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="crime-story-logs-"))
