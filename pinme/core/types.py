"""Shared enumerations."""
from enum import Enum


class UploadKind(str, Enum):
    """What was uploaded. Values match the history file format."""
    FILE = 'file'
    DIRECTORY = 'directory'
