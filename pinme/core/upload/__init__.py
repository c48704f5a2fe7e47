"""
Upload module.

Size checks, directory enumeration and the multipart upload client.
"""
from .client import UploadClient, encode_file_name
from .limits import SizeLimiter, format_size, calculate_directory_size
from .models import (
    UploadKind,
    SizeCheckResult,
    FileEntry,
    AddResponse,
    AddResponseEntry,
    UploadOutcome,
)
from .walker import DirectoryWalker, escape_transport_name, unescape_transport_name

__all__ = [
    # Client
    'UploadClient',
    'encode_file_name',
    
    # Limits
    'SizeLimiter',
    'format_size',
    'calculate_directory_size',
    
    # Walker
    'DirectoryWalker',
    'escape_transport_name',
    'unescape_transport_name',
    
    # Models
    'UploadKind',
    'SizeCheckResult',
    'FileEntry',
    'AddResponse',
    'AddResponseEntry',
    'UploadOutcome',
]
