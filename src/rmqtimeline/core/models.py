from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


class Severity(str, Enum):
    """Operational importance of a Finding (independent of the log level)."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(Enum):
    """Supported header grammars."""

    STRICT = "strict"
    PERMISSIVE = "permissive"


class NodeField(Enum):
    """Node registry fields that the annotator is allowed to write."""

    CLUSTER_NAME = "cluster_name"
    COOKIE_HASH = "cookie_hashes"
    BROKER_VERSION = "broker_versions"
    RUNTIME_VERSION = "runtime_versions"
    HOME_DIR = "home_dirs"
    DATABASE_DIR = "database_dirs"


@dataclass(frozen=True)
class Finding:
    """A semantic annotation derived from an entry by a rule."""

    message: str
    severity: Severity


@dataclass
class Entry:
    """One structured, possibly multi-line, log record."""

    source_id: int
    timestamp: str
    severity_tag: str
    process_id: str
    body_lines: List[str]
    findings: List[Finding] = field(default_factory=list)
    line_number: int = 0

    def __post_init__(self):
        # A header always carries a message, even an empty one
        if not self.body_lines:
            self.body_lines = [""]

    @property
    def text(self) -> str:
        return "\n".join(self.body_lines)


@dataclass(frozen=True)
class RegistryUpdate:
    """A single observation to be recorded on a node by the registry reducer."""

    source_id: int
    field: NodeField
    value: str


@dataclass
class Node:
    """Identity and observed metadata of one log source."""

    source_id: int
    file_label: str
    file_path: str = ""
    cluster_name: Optional[str] = None
    cookie_hashes: List[str] = field(default_factory=list)
    broker_versions: List[str] = field(default_factory=list)
    runtime_versions: List[str] = field(default_factory=list)
    home_dirs: List[str] = field(default_factory=list)
    database_dirs: List[str] = field(default_factory=list)


class EntryStore:
    """Ordered sequence of entries across all sources, in load order."""

    def __init__(self):
        self._entries: List[Entry] = []

    def extend(self, entries: List[Entry]):
        self._entries.extend(entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Entry:
        return self._entries[index]


@dataclass
class TimelineTable:
    """Timestamp-by-node dense grid of entries.

    ``timestamps`` holds the sorted row keys; ``rows`` maps every key to a
    list of exactly ``node_count`` cells, each an ordered list of entries.
    """

    node_count: int
    timestamps: List[str] = field(default_factory=list)
    rows: Dict[str, List[List[Entry]]] = field(default_factory=dict)

    def row(self, timestamp: str) -> List[List[Entry]]:
        return self.rows[timestamp]

    def cell(self, timestamp: str, source_id: int) -> List[Entry]:
        return self.rows[timestamp][source_id]

    def entry_count(self) -> int:
        return sum(len(cell) for cells in self.rows.values() for cell in cells)

    def __iter__(self) -> Iterator[Tuple[str, List[List[Entry]]]]:
        for timestamp in self.timestamps:
            yield timestamp, self.rows[timestamp]

    def __len__(self) -> int:
        return len(self.timestamps)
