import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from rmqtimeline.analysis.registry import NodeRegistry
from rmqtimeline.analysis.rule_engine import RuleEngine
from rmqtimeline.analysis.summary import ClusterSummary, SummaryBuilder
from rmqtimeline.analysis.timeline import TimelineIndexer
from rmqtimeline.core.models import EntryStore, LogFormat, TimelineTable
from rmqtimeline.parsers.base import BaseLogParser
from rmqtimeline.parsers.factory import LogParserFactory


@dataclass
class TimelineReport:
    """Everything a renderer needs: node registry, timeline table and digest."""

    registry: NodeRegistry
    entries: EntryStore
    table: TimelineTable
    summary: ClusterSummary
    parse_stats: Dict[int, Dict[str, Any]] = field(default_factory=dict)


class TimelineAnalyzer:
    """Correlates RabbitMQ node logs into a single annotated timeline.

    Phases run strictly in sequence: every source is parsed to completion,
    then the annotator makes one pass over all entries, its registry updates
    are reduced into the node registry, and finally the table is indexed.
    """

    def __init__(
        self,
        log_format: Optional[LogFormat] = None,
        rule_engine: Optional[RuleEngine] = None,
    ):
        self.parser_factory = LogParserFactory()
        self.rule_engine = rule_engine or RuleEngine()
        self.indexer = TimelineIndexer()
        self.summary_builder = SummaryBuilder()
        self.log_format = log_format
        self.logger = logging.getLogger(__name__)

    def analyze_files(
        self, file_paths: Sequence[str], labels: Optional[Sequence[str]] = None
    ) -> TimelineReport:
        """Analyze one log file per node. Files must exist and be readable."""
        registry = NodeRegistry()
        store = EntryStore()
        parse_stats = {}

        self.logger.info(f"Analyzing {len(file_paths)} log files...")

        for i, file_path in enumerate(file_paths):
            label = labels[i] if labels and i < len(labels) else None
            node = registry.register(file_path, label)

            if self.log_format:
                parser = self.parser_factory.get_parser(self.log_format)
            else:
                parser = self.parser_factory.detect_format(file_path)

            entries = parser.parse_file(file_path, node.source_id)
            store.extend(entries)
            parse_stats[node.source_id] = self._log_parsing_stats(
                parser, node.file_label
            )

        return self._correlate(registry, store, parse_stats)

    def analyze_streams(
        self, sources: Sequence[Tuple[str, Iterable[str]]]
    ) -> TimelineReport:
        """Analyze already-opened sources given as (label, lines) pairs."""
        registry = NodeRegistry()
        store = EntryStore()
        parse_stats = {}

        for label, lines in sources:
            node = registry.register(label=label)
            lines = list(lines)

            if self.log_format:
                parser = self.parser_factory.get_parser(self.log_format)
            else:
                parser = self.parser_factory.detect_from_sample(lines[:20], label)

            store.extend(parser.parse_lines(lines, node.source_id))
            parse_stats[node.source_id] = self._log_parsing_stats(parser, label)

        return self._correlate(registry, store, parse_stats)

    def _correlate(
        self,
        registry: NodeRegistry,
        store: EntryStore,
        parse_stats: Dict[int, Dict[str, Any]],
    ) -> TimelineReport:
        updates = self.rule_engine.annotate(store)
        registry.apply(updates)

        table = self.indexer.build(store, len(registry))
        summary = self.summary_builder.build(table, registry.nodes)

        self.logger.info(
            f"Indexed {len(store)} entries from {len(registry)} nodes into {len(table)} rows"
        )

        return TimelineReport(
            registry=registry,
            entries=store,
            table=table,
            summary=summary,
            parse_stats=parse_stats,
        )

    def _log_parsing_stats(self, parser: BaseLogParser, label: str) -> Dict[str, Any]:
        stats = parser.get_parsing_stats()
        format_info = parser.get_format_info()

        self.logger.info(
            f"Parsed {stats['parsed_count']} entries from {label} using "
            f"{format_info['format_type']} parser"
        )
        if stats["error_count"] > 0:
            self.logger.warning(
                f"Dropped {stats['error_count']} lines of {label} "
                f"(success rate: {stats['success_rate']:.1%})"
            )
        return stats
