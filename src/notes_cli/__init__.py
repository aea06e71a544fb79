"""Notes CLI - a traced command-line client for the notes task service.

Subcommands map one to one onto HTTP requests against the service:

- ``list``   GET the task listing and print it unchanged
- ``add``    POST a new task description
- ``update`` PUT a new description for a task number
- ``remove`` DELETE a task number

Every request carries W3C trace context headers from OpenTelemetry.
"""

__version__ = "0.1.0"

from notes_cli.client import (
    HTTPStatusFailure,
    OutputFailure,
    TaskClient,
    TaskServiceError,
    TransportFailure,
)
from notes_cli.config import (
    NotesSettings,
    SettingsContext,
    get_settings,
    reload_settings,
    set_settings,
)
from notes_cli.telemetry import Telemetry, start_telemetry

__all__ = [
    # Client
    "TaskClient",
    "TaskServiceError",
    "HTTPStatusFailure",
    "TransportFailure",
    "OutputFailure",
    # Settings
    "NotesSettings",
    "SettingsContext",
    "get_settings",
    "set_settings",
    "reload_settings",
    # Telemetry
    "Telemetry",
    "start_telemetry",
]
