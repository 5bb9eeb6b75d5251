"""rmqtimeline - Correlate RabbitMQ cluster node logs into a single annotated timeline."""

__version__ = "0.1.0"

from rmqtimeline.analysis.analyzer import TimelineAnalyzer, TimelineReport
from rmqtimeline.analysis.registry import NodeRegistry
from rmqtimeline.analysis.rule_engine import Rule, RuleEngine
from rmqtimeline.analysis.timeline import TimelineIndexer
from rmqtimeline.core.models import (
    Entry,
    Finding,
    LogFormat,
    Node,
    Severity,
    TimelineTable,
)
from rmqtimeline.parsers.factory import LogParserFactory

__all__ = [
    "Entry",
    "Finding",
    "LogFormat",
    "Node",
    "Severity",
    "TimelineTable",
    "NodeRegistry",
    "Rule",
    "RuleEngine",
    "TimelineIndexer",
    "TimelineAnalyzer",
    "TimelineReport",
    "LogParserFactory",
]
