import os
from typing import List, Sequence

from rmqtimeline.core.exceptions import SourceValidationError


def validate_log_files(file_paths: Sequence[str]) -> List[str]:
    """Check every input file exists and is readable before parsing starts."""
    valid_files = []
    for file_path in file_paths:
        if not os.path.isfile(file_path):
            raise SourceValidationError(
                f'Cannot access "{file_path}": no such file'
            )
        if not os.access(file_path, os.R_OK):
            raise SourceValidationError(
                f'Cannot access "{file_path}": permission denied'
            )
        valid_files.append(file_path)
    return valid_files


def validate_labels(labels: Sequence[str], file_paths: Sequence[str]) -> List[str]:
    """Labels are optional, but when given there must be one per file."""
    if labels and len(labels) != len(file_paths):
        raise SourceValidationError(
            f"Got {len(labels)} labels for {len(file_paths)} log files"
        )
    return list(labels or [])
