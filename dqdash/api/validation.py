import os
from typing import Any, Optional

from dqdash.api.errors import ValidationError

MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB


def file_name(file: Any) -> str:
    name = getattr(file, "name", None)
    if name is None:
        return ""
    return os.path.basename(str(name))


def file_size(file: Any) -> Optional[int]:
    """
    Size in bytes of an uploaded file.
    Streamlit's UploadedFile exposes `size`; plain binary handles are measured
    by seeking to the end and back.
    """
    size = getattr(file, "size", None)
    if size is not None:
        return int(size)
    if hasattr(file, "seek") and hasattr(file, "tell"):
        pos = file.tell()
        file.seek(0, os.SEEK_END)
        size = file.tell()
        file.seek(pos)
        return size
    return None


def validate_csv_file(file: Any, max_size: int = MAX_FILE_SIZE) -> int:
    """
    Check that `file` is a CSV of acceptable size. Returns the size in bytes.
    Raises ValidationError with a readable reason otherwise.
    """
    if file is None:
        raise ValidationError("No file was provided")

    name = file_name(file)
    if not name.lower().endswith(".csv"):
        raise ValidationError("Only CSV files are supported")

    size = file_size(file)
    if size is None:
        raise ValidationError(f"Could not determine the size of {name}")
    if size > max_size:
        raise ValidationError(f"The file is too large. Maximum {max_size // (1024 * 1024)}MB")
    return size


def format_size(num_bytes: int) -> str:
    return f"{num_bytes / 1024 / 1024:.2f} MB"
