import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from rmqtimeline.core.exceptions import MalformedContinuationError
from rmqtimeline.core.models import Entry


class BaseLogParser(ABC):
    """Abstract base class for all log parsers."""

    def __init__(self):
        self.format_type = None
        self.parsed_count = 0
        self.continuation_count = 0
        self.error_count = 0
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def can_parse(self, sample_lines: List[str]) -> bool:
        """
        Determine if this parser can handle the given log format.
        Args:
            sample_lines: First few lines of the log file for format detection
        Returns:
            True if this parser can handle the format
        """
        pass

    @abstractmethod
    def match_header(self, line: str) -> Optional[Dict[str, str]]:
        """
        Decompose a header line into its components.
        Args:
            line: Raw log line without its line terminator
        Returns:
            Mapping with date, time, severity, pid and message, or None
            when the line is not a header
        """
        pass

    @abstractmethod
    def get_format_info(self) -> Dict[str, Any]:
        """
        Get information about this parser's format.
        Returns:
            Dictionary with format metadata
        """
        pass

    def parse_line(
        self,
        line: str,
        last_entry: Optional[Entry],
        source_id: int = 0,
        line_number: int = 0,
    ) -> Optional[Entry]:
        """
        Parse a single line of one source.
        Args:
            line: Raw log line
            last_entry: Entry most recently produced for the same source
            source_id: Index of the source the line belongs to
            line_number: 1-based line number in the source
        Returns:
            A new Entry for a header line, None when the line was attached
            to ``last_entry`` as a continuation
        Raises:
            MalformedContinuationError: continuation with no preceding entry
        """
        line = line.rstrip("\r\n")
        parts = self.match_header(line)

        if parts is None:
            if last_entry is None:
                raise MalformedContinuationError(source_id, line_number, line)
            last_entry.body_lines.append(line)
            return None

        return Entry(
            source_id=source_id,
            timestamp=f"{parts['date']} {parts['time']}",
            severity_tag=parts["severity"],
            process_id=parts["pid"],
            body_lines=[parts["message"]],
            line_number=line_number,
        )

    def parse_lines(self, lines: Iterable[str], source_id: int = 0) -> List[Entry]:
        """
        Parse every line of one source, in order.
        Args:
            lines: Text lines of the source
            source_id: Index of the source
        Returns:
            List of Entry objects in encounter order
        """
        entries: List[Entry] = []
        self.parsed_count = 0
        self.continuation_count = 0
        self.error_count = 0

        last_entry = None
        for line_num, line in enumerate(lines, 1):
            try:
                entry = self.parse_line(line, last_entry, source_id, line_num)
            except MalformedContinuationError as e:
                self.error_count += 1
                self.logger.warning(f"Dropping line: {e}")
                continue

            if entry is None:
                self.continuation_count += 1
            else:
                entries.append(entry)
                last_entry = entry
                self.parsed_count += 1

        return entries

    def parse_file(self, file_path: str, source_id: int = 0) -> List[Entry]:
        """
        Parse an entire log file.
        Args:
            file_path: Path to the log file
            source_id: Index of the source
        Returns:
            List of Entry objects
        """
        with open(file_path, "r", encoding="utf-8-sig", errors="ignore") as f:
            return self.parse_lines(f, source_id)

    def get_parsing_stats(self) -> Dict[str, Any]:
        """Get parsing statistics."""
        total = self.parsed_count + self.continuation_count + self.error_count
        return {
            "parsed_count": self.parsed_count,
            "continuation_count": self.continuation_count,
            "error_count": self.error_count,
            "success_rate": (total - self.error_count) / total if total > 0 else 0,
        }
