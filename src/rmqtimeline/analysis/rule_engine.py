import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from rmqtimeline.core.models import Entry, Finding, NodeField, RegistryUpdate, Severity

Tokens = Tuple[str, ...]
Extractor = Callable[[str], Optional[Tokens]]
FindingBuilder = Callable[[str, Tokens], Finding]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """A declarative annotation rule keyed by an anchor substring.

    When ``anchor`` occurs in a body line, ``extract`` (if any) pulls tokens
    out of the line; a ``None`` result skips the rule for that line. The
    tokens feed ``registry_fields`` pairwise and the ``finding`` builder.
    """

    name: str
    anchor: str
    extract: Optional[Extractor] = None
    finding: Optional[FindingBuilder] = None
    registry_fields: Tuple[NodeField, ...] = ()


@dataclass
class Annotation:
    """Result of evaluating all rules against one entry."""

    findings: List[Finding] = field(default_factory=list)
    updates: List[RegistryUpdate] = field(default_factory=list)


def tokens_after(anchor: str, *indices: int) -> Extractor:
    """Whitespace tokens counted from the anchor occurrence (0-based)."""

    def extract(line: str) -> Optional[Tokens]:
        start = line.find(anchor)
        if start < 0:
            return None
        tokens = line[start:].split()
        if max(indices) >= len(tokens):
            return None
        return tuple(tokens[i] for i in indices)

    return extract


def field_after(separator: str = " : ") -> Extractor:
    """The field following the first separator of a ``key : value`` line."""

    def extract(line: str) -> Optional[Tokens]:
        parts = line.split(separator)
        if len(parts) < 2 or not parts[1].strip():
            return None
        return (parts[1].strip(),)

    return extract


def static(message: str, severity: Severity) -> FindingBuilder:
    return lambda line, tokens: Finding(message, severity)


def formatted(template: str, severity: Severity) -> FindingBuilder:
    return lambda line, tokens: Finding(template.format(*tokens), severity)


def verbatim(severity: Severity) -> FindingBuilder:
    return lambda line, tokens: Finding(line, severity)


def default_rules() -> List[Rule]:
    """The RabbitMQ rule catalogue, in evaluation order."""
    return [
        Rule(
            name="node_name",
            anchor="node           :",
            extract=field_after(),
            registry_fields=(NodeField.CLUSTER_NAME,),
        ),
        Rule(
            name="home_dir",
            anchor="home dir       :",
            extract=field_after(),
            registry_fields=(NodeField.HOME_DIR,),
        ),
        Rule(
            name="cookie_hash",
            anchor="cookie hash    :",
            extract=field_after(),
            registry_fields=(NodeField.COOKIE_HASH,),
        ),
        Rule(
            name="database_dir",
            anchor="database dir   :",
            extract=field_after(),
            registry_fields=(NodeField.DATABASE_DIR,),
        ),
        Rule(
            name="broker_start",
            anchor="Starting RabbitMQ ",
            extract=tokens_after("Starting RabbitMQ ", 2, 5),
            finding=static("RabbitMQ is starting", Severity.INFO),
            registry_fields=(NodeField.BROKER_VERSION, NodeField.RUNTIME_VERSION),
        ),
        Rule(
            name="empty_mnesia_dir",
            anchor="Assuming we need to join an existing cluster",
            finding=static("Mnesia directory was empty", Severity.WARNING),
        ),
        Rule(
            name="administrative_stop",
            anchor="RabbitMQ is asked to stop...",
            finding=static("Stopped via administrative command", Severity.WARNING),
        ),
        Rule(
            name="sigterm_stop",
            anchor="SIGTERM received - shutting down",
            finding=static("Stopped via termination signal", Severity.WARNING),
        ),
        Rule(
            name="memory_limit",
            anchor="Memory high watermark set to ",
            extract=tokens_after("Memory high watermark set to ", 5),
            finding=formatted("Memory limit: {0}", Severity.INFO),
        ),
        Rule(
            name="disk_free_limit",
            anchor="Disk free limit set to ",
            extract=tokens_after("Disk free limit set to ", 5),
            finding=formatted("Disk free limit: {0}", Severity.INFO),
        ),
        Rule(
            name="file_handle_limit",
            anchor="Limiting to approx ",
            extract=tokens_after("Limiting to approx ", 3),
            finding=formatted("File handle limit: {0}", Severity.INFO),
        ),
        Rule(
            name="disk_sufficient",
            anchor="Free disk space is sufficient.",
            finding=verbatim(Severity.INFO),
        ),
        Rule(
            name="disk_insufficient",
            anchor="Free disk space is insufficient.",
            finding=verbatim(Severity.ERROR),
        ),
        Rule(
            name="disk_alarm",
            anchor="disk resource limit alarm set on node ",
            finding=verbatim(Severity.ERROR),
        ),
        Rule(
            name="net_tick_timeout",
            anchor=" down: net_tick_timeout",
            finding=verbatim(Severity.ERROR),
        ),
    ]


class RuleEngine:
    """Rule-based pattern extraction engine for RabbitMQ log entries."""

    def __init__(self, rules: Optional[Iterable[Rule]] = None):
        self.rules = list(rules) if rules is not None else default_rules()

    def add_rule(self, rule: Rule):
        """Add a custom rule, evaluated after the existing ones."""
        self.rules.append(rule)

    def evaluate(self, entry: Entry) -> Annotation:
        """Evaluate every rule against every body line of an entry.

        Pure: the entry is not modified.
        """
        annotation = Annotation()
        for line in entry.body_lines:
            for rule in self.rules:
                if rule.anchor in line:
                    self._apply_single_rule(rule, entry, line, annotation)
        return annotation

    def annotate(self, entries: Iterable[Entry]) -> List[RegistryUpdate]:
        """Attach findings to each entry and collect registry updates.

        Findings are replaced, not extended, so repeated passes over the same
        entries yield the same result.
        """
        updates: List[RegistryUpdate] = []
        for entry in entries:
            annotation = self.evaluate(entry)
            entry.findings = annotation.findings
            updates.extend(annotation.updates)
        return updates

    def _apply_single_rule(
        self, rule: Rule, entry: Entry, line: str, annotation: Annotation
    ):
        tokens: Tokens = ()
        if rule.extract is not None:
            extracted = rule.extract(line)
            if extracted is None:
                logger.debug(
                    f"Rule '{rule.name}' skipped on source {entry.source_id} "
                    f"at {entry.timestamp}: expected token missing in {line!r}"
                )
                return
            tokens = extracted

        for node_field, token in zip(rule.registry_fields, tokens):
            annotation.updates.append(
                RegistryUpdate(
                    source_id=entry.source_id,
                    field=node_field,
                    value=f"{entry.timestamp} {token}",
                )
            )

        if rule.finding is not None:
            annotation.findings.append(rule.finding(line, tokens))
