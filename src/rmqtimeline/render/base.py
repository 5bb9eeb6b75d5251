from abc import ABC, abstractmethod

from rmqtimeline.analysis.analyzer import TimelineReport


class BaseRenderer(ABC):
    """Turns a TimelineReport into a human-viewable artifact."""

    name = ""

    @abstractmethod
    def render(self, report: TimelineReport) -> str:
        """
        Render the report.
        Args:
            report: Node registry, timeline table and summary
        Returns:
            The rendered document as text
        """
        pass
