"""
Service Module - Roadmap flow against the API.
==============================================

Loads saved questionnaire answers, saves new ones and asks the API to
generate (or serve from its cache) the matching roadmap.
"""

from typing import Any, Optional, Union

from researchconnect.api.client import ResearchConnectClient
from researchconnect.api.errors import NotFoundError
from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import (
    PlacementPreferences,
    ResearchPreferences,
    RoadmapKind,
    RoadmapResult,
    RoadmapStructure,
)

logger = get_logger(__name__)

Preferences = Union[ResearchPreferences, PlacementPreferences]


class RoadmapService:
    """
    Roadmap operations for both roadmap kinds.

    Example:
        >>> service = RoadmapService(client)
        >>> prefs = service.load_preferences("research")
        >>> result = service.generate("research")
        >>> print(result.roadmap.title, result.cached)
    """

    def __init__(self, client: ResearchConnectClient):
        self.client = client

    def load_preferences(self, kind: str) -> Optional[Preferences]:
        """Saved answers for ``kind``, or None if the student has none yet."""
        try:
            if RoadmapKind(kind) is RoadmapKind.PLACEMENT:
                return self.client.get_placement_preferences()
            return self.client.get_preferences()
        except NotFoundError:
            logger.debug(f"No saved {kind} preferences")
            return None

    def save_preferences(self, kind: str, preferences: Preferences) -> None:
        if RoadmapKind(kind) is RoadmapKind.PLACEMENT:
            if not isinstance(preferences, PlacementPreferences):
                raise TypeError("Placement roadmap needs PlacementPreferences")
            self.client.save_placement_preferences(preferences)
        else:
            if not isinstance(preferences, ResearchPreferences):
                raise TypeError("Research roadmap needs ResearchPreferences")
            self.client.save_preferences(preferences)
        logger.info(f"Saved {kind} preferences")

    def generate(self, kind: str) -> RoadmapResult:
        """Generate the roadmap for the saved preferences."""
        if RoadmapKind(kind) is RoadmapKind.PLACEMENT:
            result = self.client.generate_placement_roadmap()
        else:
            result = self.client.generate_roadmap()
        logger.info(
            f"{kind.capitalize()} roadmap '{result.roadmap.title}' "
            f"({len(result.roadmap.nodes)} steps, cached={result.cached})"
        )
        return result

    def save_and_generate(self, kind: str, preferences: Preferences) -> RoadmapResult:
        self.save_preferences(kind, preferences)
        return self.generate(kind)

    def history(self) -> list[dict[str, Any]]:
        """
        Previously generated roadmaps, newest first.

        Each entry gets a decoded ``roadmap`` (a ``RoadmapStructure``) next
        to the raw ``roadmap_data`` string.
        """
        entries = []
        for entry in self.client.get_roadmap_history():
            item = dict(entry)
            try:
                item["roadmap"] = RoadmapStructure.from_payload(entry.get("roadmap_data") or {})
            except ValueError as e:
                logger.warning(f"Skipping unreadable roadmap {entry.get('id')}: {e}")
                continue
            entries.append(item)
        return entries
