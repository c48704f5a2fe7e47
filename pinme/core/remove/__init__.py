"""
Removal module.

Parses removal targets and calls the storage service's removal endpoint.
"""
from .parser import (
    RemovalKind,
    RemovalTarget,
    parse_removal_input,
    is_valid_content_hash,
    is_valid_subname,
)
from .client import RemovalClient, STATUS_HINTS

__all__ = [
    'RemovalKind',
    'RemovalTarget',
    'parse_removal_input',
    'is_valid_content_hash',
    'is_valid_subname',
    'RemovalClient',
    'STATUS_HINTS',
]
