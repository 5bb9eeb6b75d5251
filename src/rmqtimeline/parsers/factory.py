import logging
from typing import Iterable, List

from rmqtimeline.core.models import LogFormat
from rmqtimeline.parsers.base import BaseLogParser
from rmqtimeline.parsers.rabbitmq import (
    PERMISSIVE_GRAMMAR,
    STRICT_GRAMMAR,
    RabbitMQLogParser,
)

logger = logging.getLogger(__name__)


class LogParserFactory:
    """Factory for creating appropriate log parsers based on content analysis."""

    def __init__(self):
        # Ordered from most to least specific
        self.parsers = [
            RabbitMQLogParser(STRICT_GRAMMAR),
            RabbitMQLogParser(PERMISSIVE_GRAMMAR),
        ]

    def detect_format(self, file_path: str, sample_lines: int = 20) -> BaseLogParser:
        """
        Detect the header grammar of a file and return a parser for it.
        Args:
            file_path: Path to the log file
            sample_lines: Number of lines to sample for detection
        Returns:
            Appropriate parser instance
        """
        sample = []
        with open(file_path, "r", encoding="utf-8-sig", errors="ignore") as f:
            for i, line in enumerate(f):
                if i >= sample_lines:
                    break
                sample.append(line)

        return self.detect_from_sample(sample, label=file_path)

    def detect_from_sample(
        self, sample: Iterable[str], label: str = "<stream>"
    ) -> BaseLogParser:
        """Pick a parser for already-read sample lines."""
        sample = list(sample)
        if not any(line.strip() for line in sample):
            logger.info(f"No lines to sample in {label}, using strict parser")
            return self.get_parser(LogFormat.STRICT)

        # Strict needs a 30% header share; any permissive header beats falling back
        strict, permissive = self.parsers
        if strict.can_parse(sample):
            chosen = strict
        elif permissive.count_headers(sample):
            chosen = permissive
        else:
            chosen = None

        if chosen is not None:
            logger.info(f"Detected format for {label}: {chosen.format_type.value}")
            return self.get_parser(chosen.format_type)

        logger.warning(
            f"Format detection inconclusive for {label}, defaulting to strict parser"
        )
        return self.get_parser(LogFormat.STRICT)

    def get_parser(self, format_type: LogFormat) -> BaseLogParser:
        """
        Get a specific parser by format type.
        Args:
            format_type: The desired header grammar
        Returns:
            Parser instance for the specified format
        """
        grammar_map = {
            LogFormat.STRICT: STRICT_GRAMMAR,
            LogFormat.PERMISSIVE: PERMISSIVE_GRAMMAR,
        }

        grammar = grammar_map.get(format_type)
        if grammar:
            return RabbitMQLogParser(grammar)
        else:
            raise ValueError(f"No parser available for format: {format_type}")

    def get_supported_formats(self) -> List[LogFormat]:
        """Get list of supported log formats."""
        return [parser.format_type for parser in self.parsers]
