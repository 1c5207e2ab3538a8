"""
Roadmap Module - Personalised research and placement roadmaps.
==============================================================

- questionnaire: multi-step wizards collecting roadmap preferences
- service: save preferences and generate roadmaps through the API
- layout: position roadmap nodes and edges for display

Roadmap Flow:
    Questionnaire → Preferences → API (generate / cache) → RoadmapStructure → Layout
"""

from researchconnect.roadmap.layout import (
    RoadmapEdge,
    RoadmapLayout,
    PositionedNode,
    category_color,
    layout_roadmap,
    ordered_steps,
    resource_kind,
)
from researchconnect.roadmap.questionnaire import (
    PlacementQuestionnaire,
    ResearchQuestionnaire,
    RoadmapTypeSelector,
    Wizard,
    questionnaire_for,
)
from researchconnect.roadmap.service import RoadmapService

__all__ = [
    # Questionnaire
    "PlacementQuestionnaire",
    "ResearchQuestionnaire",
    "RoadmapTypeSelector",
    "Wizard",
    "questionnaire_for",
    # Service
    "RoadmapService",
    # Layout
    "PositionedNode",
    "RoadmapEdge",
    "RoadmapLayout",
    "category_color",
    "layout_roadmap",
    "ordered_steps",
    "resource_kind",
]
