import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from rmqtimeline.core.models import LogFormat
from rmqtimeline.parsers.base import BaseLogParser


@dataclass(frozen=True)
class HeaderGrammar:
    """Token grammar of a log header: date, time, [severity], <pid>, message."""

    format_type: LogFormat
    date: str
    time: str
    severity: str
    pid: str
    description: str = ""

    def compile(self) -> "re.Pattern[str]":
        return re.compile(
            rf"(?P<date>{self.date}) (?P<time>{self.time}) "
            rf"\[(?P<severity>{self.severity})\] <(?P<pid>{self.pid})> (?P<message>.*)"
        )


# RabbitMQ 3.7/3.8 lager format: 2019-05-14 10:21:13.486 [info] <0.33.0> ...
STRICT_GRAMMAR = HeaderGrammar(
    format_type=LogFormat.STRICT,
    date=r"[0-9-]{10}",
    time=r"[0-9.:]{12}",
    severity=r"[a-z]+",
    pid=r"[0-9.]+",
    description="RabbitMQ lager header with millisecond timestamps",
)

# Same token shape, any precision / offset and any id or severity strings
PERMISSIVE_GRAMMAR = HeaderGrammar(
    format_type=LogFormat.PERMISSIVE,
    date=r"\d{4}-\d{2}-\d{2}",
    time=r"[0-9][0-9.:+-]*",
    severity=r"\w+",
    pid=r"[^>]+",
    description="Any date/time/[level]/<pid> header of the same shape",
)


class RabbitMQLogParser(BaseLogParser):
    """Parses RabbitMQ node logs into entries with continuation lines."""

    def __init__(self, grammar: HeaderGrammar = STRICT_GRAMMAR):
        super().__init__()
        self.grammar = grammar
        self.format_type = grammar.format_type
        self.header_pattern = grammar.compile()

    def can_parse(self, sample_lines: List[str]) -> bool:
        """Determine if enough sampled lines are headers of this grammar."""
        non_empty = [line for line in sample_lines if line.strip()]
        headers = self.count_headers(non_empty)

        # Multi-line records are common, so a minority of headers is enough
        return headers > 0 and headers >= len(non_empty) * 0.3

    def count_headers(self, sample_lines: List[str]) -> int:
        return sum(1 for line in sample_lines if self.match_header(line.rstrip("\r\n")))

    def match_header(self, line: str) -> Optional[Dict[str, str]]:
        match = self.header_pattern.match(line)
        return match.groupdict() if match else None

    def get_format_info(self) -> Dict[str, Any]:
        return {
            "format_type": self.format_type.value,
            "description": self.grammar.description,
            "pattern": self.header_pattern.pattern,
        }
