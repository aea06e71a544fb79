"""Shared constants for notes-cli."""

# Address of the remote notes service. Not configurable.
BASE_URL = "http://localhost:8000"

TEXT_CONTENT_TYPE = "text/plain"

# Task numbers travel as 32-bit signed integers
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Program name shown in help output
PROG_NAME = "notes"
