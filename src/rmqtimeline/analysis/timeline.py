from typing import Iterable

from rmqtimeline.core.models import Entry, TimelineTable


class TimelineIndexer:
    """Merges entries from all sources into a timestamp-ordered table."""

    def build(self, entries: Iterable[Entry], node_count: int) -> TimelineTable:
        """
        Build the dense timeline table.
        Args:
            entries: All entries, in source-then-encounter order
            node_count: Number of registered nodes (table width)
        Returns:
            TimelineTable with one row per distinct timestamp
        """
        entries = list(entries)

        # Fixed-width date and zero-padded time: string order is time order
        timestamps = sorted({entry.timestamp for entry in entries})

        table = TimelineTable(node_count=node_count, timestamps=timestamps)
        for timestamp in timestamps:
            table.rows[timestamp] = [[] for _ in range(node_count)]

        for entry in entries:
            if not 0 <= entry.source_id < node_count:
                raise ValueError(
                    f"Entry at {entry.timestamp} belongs to source {entry.source_id}, "
                    f"but only {node_count} nodes are registered"
                )
            table.rows[entry.timestamp][entry.source_id].append(entry)

        return table
