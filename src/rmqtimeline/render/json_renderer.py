from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

from rmqtimeline.analysis.analyzer import TimelineReport
from rmqtimeline.core.models import Entry, Node
from rmqtimeline.render.base import BaseRenderer


class FindingDocument(BaseModel):
    message: str
    severity: str


class EntryDocument(BaseModel):
    source_id: int
    timestamp: str
    severity_tag: str
    process_id: str
    line_number: int
    body_lines: List[str]
    findings: List[FindingDocument] = []


class NodeDocument(BaseModel):
    source_id: int
    file_label: str
    file_path: str = ""
    cluster_name: Optional[str] = None
    cookie_hashes: List[str] = []
    broker_versions: List[str] = []
    runtime_versions: List[str] = []
    home_dirs: List[str] = []
    database_dirs: List[str] = []


class RowDocument(BaseModel):
    """One timeline row; ``cells`` has exactly one list per node."""

    timestamp: str
    cells: List[List[EntryDocument]]


class NodeSummaryDocument(BaseModel):
    source_id: int
    file_label: str
    entry_count: int
    findings_by_severity: Dict[str, int]
    first_timestamp: Optional[str] = None
    last_timestamp: Optional[str] = None


class SummaryDocument(BaseModel):
    total_entries: int
    total_rows: int
    shared_rows: int
    findings_by_severity: Dict[str, int]
    nodes: List[NodeSummaryDocument]
    busiest_rows: List[Tuple[str, int]]
    burst_rows: List[Tuple[str, int]]


class TimelineDocument(BaseModel):
    nodes: List[NodeDocument]
    rows: List[RowDocument]
    summary: SummaryDocument


def entry_document(entry: Entry) -> EntryDocument:
    return EntryDocument(
        source_id=entry.source_id,
        timestamp=entry.timestamp,
        severity_tag=entry.severity_tag,
        process_id=entry.process_id,
        line_number=entry.line_number,
        body_lines=list(entry.body_lines),
        findings=[
            FindingDocument(message=f.message, severity=f.severity.value)
            for f in entry.findings
        ],
    )


def node_document(node: Node) -> NodeDocument:
    return NodeDocument(
        source_id=node.source_id,
        file_label=node.file_label,
        file_path=node.file_path,
        cluster_name=node.cluster_name,
        cookie_hashes=list(node.cookie_hashes),
        broker_versions=list(node.broker_versions),
        runtime_versions=list(node.runtime_versions),
        home_dirs=list(node.home_dirs),
        database_dirs=list(node.database_dirs),
    )


def timeline_document(report: TimelineReport) -> TimelineDocument:
    summary = report.summary
    return TimelineDocument(
        nodes=[node_document(node) for node in report.registry],
        rows=[
            RowDocument(
                timestamp=timestamp,
                cells=[[entry_document(e) for e in cell] for cell in cells],
            )
            for timestamp, cells in report.table
        ],
        summary=SummaryDocument(
            total_entries=summary.total_entries,
            total_rows=summary.total_rows,
            shared_rows=summary.shared_rows,
            findings_by_severity=summary.findings_by_severity,
            nodes=[
                NodeSummaryDocument(
                    source_id=n.source_id,
                    file_label=n.file_label,
                    entry_count=n.entry_count,
                    findings_by_severity=n.findings_by_severity,
                    first_timestamp=n.first_timestamp,
                    last_timestamp=n.last_timestamp,
                )
                for n in summary.nodes
            ],
            busiest_rows=summary.busiest_rows,
            burst_rows=summary.burst_rows,
        ),
    )


class JsonRenderer(BaseRenderer):
    name = "json"

    def __init__(self, indent: int = 2):
        self.indent = indent

    def render(self, report: TimelineReport) -> str:
        return timeline_document(report).model_dump_json(indent=self.indent) + "\n"
