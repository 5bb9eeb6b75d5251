from typing import List

from rmqtimeline.analysis.analyzer import TimelineReport
from rmqtimeline.render.base import BaseRenderer


class TextRenderer(BaseRenderer):
    """Plain-text report for a terminal."""

    name = "text"

    def render(self, report: TimelineReport) -> str:
        lines: List[str] = []
        summary = report.summary

        lines.append("=" * 80)
        lines.append("RABBITMQ CLUSTER TIMELINE")
        lines.append("=" * 80)
        lines.append(f"Nodes: {len(report.registry)}")
        lines.append(f"Log Entries: {summary.total_entries}")
        lines.append(f"Timeline Rows: {summary.total_rows}")
        lines.append(f"Rows Shared By Several Nodes: {summary.shared_rows}")
        lines.append(f"Findings: {summary.findings_by_severity}")

        lines.append("\nNodes:")
        for node in report.registry:
            lines.append(f"  [{node.source_id}] {node.file_label}")
            lines.append(f"    Name: {node.cluster_name or '-'}")
            for title, values in (
                ("RabbitMQ", node.broker_versions),
                ("Erlang", node.runtime_versions),
                ("Cookie Hash", node.cookie_hashes),
            ):
                lines.append(f"    {title}: {', '.join(values) or '-'}")

        if summary.burst_rows:
            lines.append("\nActivity Bursts:")
            for timestamp, count in summary.burst_rows:
                lines.append(f"  {timestamp}: {count} entries")

        lines.append("\nTimeline:")
        for timestamp, cells in report.table:
            for source_id, cell in enumerate(cells):
                label = report.registry[source_id].file_label
                for entry in cell:
                    first, *rest = entry.body_lines
                    lines.append(f"{timestamp} {label} [{entry.severity_tag}] {first}")
                    lines.extend(f"    {line}" for line in rest)
                    for finding in entry.findings:
                        lines.append(
                            f"    =REPORT= ({finding.severity.value}) {finding.message}"
                        )

        return "\n".join(lines) + "\n"
