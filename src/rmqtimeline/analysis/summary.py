from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from rmqtimeline.core.models import Node, Severity, TimelineTable


@dataclass
class NodeSummary:
    """Activity digest of one node."""

    source_id: int
    file_label: str
    entry_count: int = 0
    findings_by_severity: Dict[str, int] = field(default_factory=dict)
    first_timestamp: Optional[str] = None
    last_timestamp: Optional[str] = None


@dataclass
class ClusterSummary:
    """Numeric digest of a timeline table."""

    total_entries: int = 0
    total_rows: int = 0
    shared_rows: int = 0
    nodes: List[NodeSummary] = field(default_factory=list)
    busiest_rows: List[Tuple[str, int]] = field(default_factory=list)
    burst_rows: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def findings_by_severity(self) -> Dict[str, int]:
        totals = {severity.value: 0 for severity in Severity}
        for node in self.nodes:
            for severity, count in node.findings_by_severity.items():
                totals[severity] += count
        return totals


class SummaryBuilder:
    """Builds a ClusterSummary from the (rows x nodes) matrix of cell sizes."""

    def __init__(self, top_rows: int = 5, burst_sigma: float = 2.0):
        self.top_rows = top_rows
        self.burst_sigma = burst_sigma

    def cell_counts(self, table: TimelineTable) -> np.ndarray:
        counts = np.zeros((len(table), table.node_count), dtype=int)
        for row_index, (_, cells) in enumerate(table):
            counts[row_index] = [len(cell) for cell in cells]
        return counts

    def build(self, table: TimelineTable, nodes: List[Node]) -> ClusterSummary:
        counts = self.cell_counts(table)
        row_totals = counts.sum(axis=1)
        summary = ClusterSummary(
            total_entries=int(counts.sum()),
            total_rows=len(table),
            shared_rows=int(((counts > 0).sum(axis=1) >= 2).sum()),
        )

        for node in nodes:
            summary.nodes.append(self._summarize_node(node, table, counts))

        if len(table):
            # Stable sort keeps earlier rows first among equal totals
            order = np.argsort(-row_totals, kind="stable")[: self.top_rows]
            summary.busiest_rows = [
                (table.timestamps[i], int(row_totals[i])) for i in order
            ]
            summary.burst_rows = self._detect_bursts(table, row_totals)

        return summary

    def _summarize_node(
        self, node: Node, table: TimelineTable, counts: np.ndarray
    ) -> NodeSummary:
        node_summary = NodeSummary(
            source_id=node.source_id,
            file_label=node.file_label,
            findings_by_severity={severity.value: 0 for severity in Severity},
        )
        if not len(table):
            return node_summary

        column = counts[:, node.source_id]
        node_summary.entry_count = int(column.sum())

        active = np.flatnonzero(column)
        if active.size:
            node_summary.first_timestamp = table.timestamps[active[0]]
            node_summary.last_timestamp = table.timestamps[active[-1]]

        for row_index in active:
            for entry in table.cell(table.timestamps[row_index], node.source_id):
                for finding in entry.findings:
                    node_summary.findings_by_severity[finding.severity.value] += 1

        return node_summary

    def _detect_bursts(
        self, table: TimelineTable, row_totals: np.ndarray
    ) -> List[Tuple[str, int]]:
        """Rows whose entry count is well above the table average."""
        if len(row_totals) < 3:
            return []

        threshold = np.mean(row_totals) + self.burst_sigma * np.std(row_totals)
        return [
            (table.timestamps[i], int(row_totals[i]))
            for i in np.flatnonzero(row_totals > threshold)
        ]
