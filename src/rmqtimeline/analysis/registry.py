import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from rmqtimeline.core.models import Node, NodeField, RegistryUpdate


class NodeRegistry:
    """One Node record per input source.

    Source ids are assigned once, in registration order. Node metadata only
    changes through :meth:`apply`, which records every observation in order
    and never overwrites history.
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.logger = logging.getLogger(__name__)

    def register(self, file_path: str = "", label: Optional[str] = None) -> Node:
        """Register a new source and return its node."""
        node = Node(
            source_id=len(self.nodes),
            file_label=label or Path(file_path).name or f"node{len(self.nodes)}",
            file_path=file_path,
        )
        self.nodes.append(node)
        return node

    def apply(self, updates: Iterable[RegistryUpdate]) -> int:
        """Apply registry updates in order. Returns the number applied."""
        applied = 0
        for update in updates:
            if not 0 <= update.source_id < len(self.nodes):
                self.logger.warning(
                    f"Ignoring update for unknown source {update.source_id}: {update.value}"
                )
                continue

            node = self.nodes[update.source_id]
            if update.field is NodeField.CLUSTER_NAME:
                if node.cluster_name is None:
                    node.cluster_name = update.value
                    applied += 1
                elif node.cluster_name != update.value:
                    self.logger.debug(
                        f"Node {node.file_label} already named {node.cluster_name!r}, "
                        f"keeping it over {update.value!r}"
                    )
                continue

            getattr(node, update.field.value).append(update.value)
            applied += 1

        return applied

    def __getitem__(self, source_id: int) -> Node:
        return self.nodes[source_id]

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)
