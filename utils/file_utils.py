"""
File utilities module for ProxyLogs.

This module provides the file operations used by the JSON-lines log store
and by log export, with support for reading the tail of large files.
"""

from pathlib import Path
from typing import List, Optional
import logging
import mmap


class FileUtils:
    """
    Utility class for file operations with large file support.
    """

    logger = logging.getLogger(__name__)

    @staticmethod
    def ensure_directory_exists(directory: Path) -> bool:
        """
        Ensure that a directory exists, creating it if necessary.

        Args:
            directory: Directory path to ensure

        Returns:
            True if directory exists or was created successfully
        """
        try:
            directory.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            FileUtils.logger.error(f"Failed to create directory {directory}: {str(e)}")
            return False

    @staticmethod
    def safe_write_file(file_path: Path, content: str, encoding: str = 'utf-8') -> bool:
        """
        Safely write content to a file.

        Args:
            file_path: Path to the file to write
            content: Content to write
            encoding: File encoding

        Returns:
            True if write was successful
        """
        if not FileUtils.ensure_directory_exists(file_path.parent):
            return False

        try:
            with open(file_path, 'w', encoding=encoding) as f:
                f.write(content)
            return True
        except OSError as e:
            FileUtils.logger.error(f"Error writing to file {file_path}: {str(e)}")
            return False

    @staticmethod
    def read_tail_lines(file_path: Path, num_lines: Optional[int] = None,
                        encoding: str = 'utf-8') -> List[str]:
        """
        Read the last N lines of a file without loading the whole file.

        Args:
            file_path: Path to the file
            num_lines: Number of lines to read from the end (None reads all)
            encoding: File encoding

        Returns:
            List of lines without line terminators, oldest first

        Raises:
            OSError: If the file cannot be opened or read
        """
        with open(file_path, 'rb') as f:
            if num_lines is None:
                return f.read().decode(encoding, errors='replace').splitlines()

            size = f.seek(0, 2)
            if size == 0 or num_lines <= 0:
                return []

            with mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
                # A trailing newline terminates the last line, it does not start a new one
                end = size - 1 if mapped[size - 1:size] == b'\n' else size
                pos = end
                lines_found = 0

                while pos > 0:
                    pos = mapped.rfind(b'\n', 0, pos)
                    if pos < 0:
                        pos = 0
                        break
                    lines_found += 1
                    if lines_found == num_lines:
                        pos += 1
                        break

                content = mapped[pos:end].decode(encoding, errors='replace')

        return content.splitlines()[-num_lines:]

    @staticmethod
    def append_line(file_path: Path, line: str, encoding: str = 'utf-8') -> None:
        """
        Append a single line to a file, creating it when missing.

        Raises:
            OSError: If the file cannot be written
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'a', encoding=encoding) as f:
            f.write(line.rstrip('\n') + '\n')

    @staticmethod
    def truncate_file(file_path: Path) -> None:
        """
        Empty a file if it exists.

        Raises:
            OSError: If the file cannot be truncated
        """
        if file_path.exists():
            with open(file_path, 'w'):
                pass
