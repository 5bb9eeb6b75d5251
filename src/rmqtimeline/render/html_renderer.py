from html import escape
from typing import List

from rmqtimeline.analysis.analyzer import TimelineReport
from rmqtimeline.core.models import Entry, Node
from rmqtimeline.render.base import BaseRenderer

HTML_STYLE = """
<style>
html, td {
    font-family: monospace;
    font-size: 12px;
}
body {
    margin: 10px;
}
pre {
    margin: 0px;
}
h1, h2, h3, h4 {
    margin: 0px;
}
table {
    border-top: 1px solid #EEE;
    border-left: 1px solid #EEE;
}
td, th {
    border-bottom: 1px solid #EEE;
    border-right: 1px solid #EEE;
    padding: 0px;
    vertical-align: top;
}
td > div {
    padding: 3px;
}
.indent {
    margin-left: 15px;
}
.nowrap {
    white-space: nowrap;
}
.header {
    color: #FFF;
    background-color: #171717;
}
.header td {
    padding: 5px;
    font-family: Arial;
}
.prewrap {
    white-space: pre-wrap;
}
.s_info {
    background-color: #FFFFFF;
}
.s_notice {
    background-color: #4DA6FF;
}
.s_warning {
    background-color: #FFA64D;
}
.s_error {
    background-color: #FF4D4D;
}
.s_report {
    background-color: #4DFF4D;
}
.s_report.f_warning {
    background-color: #FFD24D;
}
.s_report.f_error {
    background-color: #FF8080;
}
</style>"""


class HtmlRenderer(BaseRenderer):
    """Side-by-side HTML table: one column per node, one row per timestamp."""

    name = "html"

    def render(self, report: TimelineReport) -> str:
        nodes = report.registry.nodes
        parts: List[str] = [
            "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">",
            "<title>RabbitMQ timeline</title>",
            HTML_STYLE,
            "</head>\n<body>",
            '<table border="0" cellpadding="0" cellspacing="0">',
            "<thead>",
            self._header_row("Summary", nodes),
            "<tr><th></th>" + "".join(self._node_header(n) for n in nodes) + "</tr>",
            "</thead>",
            "<tbody>",
            self._header_row("Timeline", nodes),
        ]

        for timestamp, cells in report.table:
            parts.append("<tr>")
            parts.append(f'<td class="nowrap"><div>{escape(timestamp)}</div></td>')
            for cell in cells:
                parts.append("<td>" + "".join(self._entry(e) for e in cell) + "</td>")
            parts.append("</tr>")

        parts.extend(["</tbody>", "</table>", "</body>\n</html>"])
        return "\n".join(parts) + "\n"

    def _header_row(self, title: str, nodes: List[Node]) -> str:
        cells = "".join(f"<td><h3>{escape(n.file_label)}</h3></td>" for n in nodes)
        return f'<tr class="header"><td><h3>{title}</h3></td>{cells}</tr>'

    def _node_header(self, node: Node) -> str:
        fields = [
            ("Filename", [node.file_label]),
            ("Name", [node.cluster_name or ""]),
            ("RabbitMQ", node.broker_versions),
            ("Erlang", node.runtime_versions),
            ("Cookie Hash", node.cookie_hashes),
            ("Home Dir", node.home_dirs),
            ("Database Dir", node.database_dirs),
        ]
        body = "".join(
            f'<strong>{title}:</strong><div class="indent">'
            + "<br>".join(escape(value) for value in values)
            + "</div>"
            for title, values in fields
        )
        return f"<td><div>{body}</div></td>"

    def _entry(self, entry: Entry) -> str:
        severity = escape(entry.severity_tag)
        html = (
            f'<div class="prewrap s_{severity}"><strong>[{severity}]</strong> '
            f"{escape(entry.text)}</div>"
        )
        for finding in entry.findings:
            html += (
                f'<div class="prewrap s_report f_{finding.severity.value}">'
                f"<strong>=REPORT=</strong> {escape(finding.message)}</div>"
            )
        return html
