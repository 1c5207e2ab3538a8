"""
Tests for the Roadmap Module.
=============================

Tests for:
- Questionnaires: step gating, interest pruning, placement levels
- Layout: level rows, centring, edges and colours
- Service: preferences, generation and history against a mock client
"""

import json
from unittest.mock import Mock

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Research Questionnaire Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestResearchQuestionnaire:
    """Tests for the four-step research wizard."""

    def _completed(self):
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()
        wizard.set_field_of_study("Physics")
        wizard.experience_level = "beginner"
        wizard.toggle_interest("Quantum Mechanics")
        wizard.goals = "Publish a paper on quantum error correction"
        return wizard

    def test_defaults_from_settings(self):
        """Test questionnaire defaults taken from the settings."""
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()

        assert wizard.step == 1
        assert wizard.current_year == 1
        assert wizard.time_commitment == 10
        assert wizard.progress == 25.0

    def test_step_one_requires_field_and_experience(self):
        """Test that step one needs a field and an experience level."""
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()
        assert wizard.next() is False

        wizard.set_field_of_study("Physics")
        assert wizard.next() is False

        wizard.experience_level = "advanced"
        assert wizard.next() is True
        assert wizard.step == 2

    def test_back_stops_at_first_step(self):
        """Test that going back stops at the first step."""
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()

        assert wizard.back() is False
        assert wizard.step == 1

    def test_changing_field_prunes_interests(self):
        """Test that changing the field drops interests it does not offer."""
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()
        wizard.set_field_of_study("Computer Science")
        wizard.toggle_interest("Machine Learning")
        wizard.add_custom_interest("Quantum Mechanics")

        wizard.set_field_of_study("Physics")

        assert wizard.selected_interests == ["Quantum Mechanics"]
        assert "Astrophysics" in wizard.available_interests

    def test_unknown_field_offers_general_research(self):
        """Test the interests offered for an unknown field."""
        from researchconnect.roadmap.questionnaire import interests_for_field

        assert interests_for_field("Basket Weaving") == ["General Research"]

    def test_custom_interest_unique_and_non_blank(self):
        """Test adding custom interests."""
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()

        assert wizard.add_custom_interest(" Quantum Biology ") is True
        assert wizard.add_custom_interest("Quantum Biology") is False
        assert wizard.add_custom_interest("   ") is False
        wizard.remove_interest("Quantum Biology")
        assert wizard.selected_interests == []

    def test_goals_must_exceed_minimum(self):
        """Test that research goals must be longer than the minimum."""
        wizard = self._completed()
        wizard.step = 4

        wizard.goals = "x" * 20
        assert wizard.can_proceed() is False

        wizard.goals = "x" * 21
        assert wizard.can_proceed() is True

    def test_to_preferences_encodes_interests(self):
        """Test that interests are sent as a JSON string."""
        wizard = self._completed()

        prefs = wizard.to_preferences()

        assert prefs.field_of_study == "Physics"
        assert json.loads(prefs.interest_areas) == ["Quantum Mechanics"]

    def test_loads_saved_preferences(self):
        """Test starting the research questionnaire from saved preferences."""
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire
        from researchconnect.shared.schemas import ResearchPreferences

        saved = ResearchPreferences(
            field_of_study="Biology",
            experience_level="intermediate",
            current_year=3,
            goals="Understand gene regulation networks",
            interest_areas='["Genetics"]',
        )

        wizard = ResearchQuestionnaire(saved)

        assert wizard.current_year == 3
        assert wizard.selected_interests == ["Genetics"]


# ─────────────────────────────────────────────────────────────────────────────
# Placement Questionnaire Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestPlacementQuestionnaire:
    """Tests for the five-step placement wizard."""

    def test_step_one_requires_intensity(self):
        """Test that the placement timeline step needs an intensity."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        assert wizard.can_proceed() is False

        wizard.intensity_type = "regular"
        assert wizard.next() is True

    def test_levels_required_for_each_area(self):
        """Test that every prep area needs a level."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        wizard.toggle_prep_area("dsa")
        wizard.toggle_prep_area("aptitude")
        wizard.step = 3

        wizard.set_level("dsa", "beginner")
        assert wizard.can_proceed() is False

        wizard.set_level("aptitude", "confident")
        assert wizard.can_proceed() is True

    def test_deselecting_area_drops_level(self):
        """Test that deselecting a prep area drops its level."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        wizard.toggle_prep_area("dsa")
        wizard.set_level("dsa", "beginner")

        wizard.toggle_prep_area("dsa")

        assert wizard.prep_areas == []
        assert wizard.current_levels == {}

    def test_resources_and_companies_optional(self):
        """Test that resources and companies may be left empty."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        wizard.step = 4

        assert wizard.can_proceed() is True
        assert wizard.add_company("Acme") is True
        assert wizard.add_company("Acme") is False
        wizard.remove_company("Acme")
        assert wizard.target_companies == []

    def test_goals_minimum_inclusive(self):
        """Test that placement goals may be exactly the minimum length."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        wizard.step = 5

        wizard.goals = "x" * 19
        assert wizard.can_proceed() is False
        wizard.goals = "x" * 20
        assert wizard.can_proceed() is True

    @pytest.mark.parametrize(
        "weeks,hours,expected",
        [(4, 5, "intense"), (20, 30, "regular"), (8, 15, "intense"), (8, 10, "regular")],
    )
    def test_intensity_suggestion(self, weeks, hours, expected):
        """Test the intensity suggested for weekly hours."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        wizard.timeline_weeks = weeks
        wizard.time_commitment = hours

        assert wizard.intensity_suggestion() == expected

    def test_suggested_resources(self):
        """Test resources suggested for the chosen prep areas."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        wizard.toggle_prep_area("resume")
        wizard.toggle_prep_area("dsa")

        suggestions = wizard.suggested_resources()

        assert list(suggestions) == ["dsa"]
        assert "LeetCode" in suggestions["dsa"]

    def test_to_preferences_round_trips_levels(self):
        """Test that placement preferences load back into the wizard."""
        from researchconnect.roadmap.questionnaire import PlacementQuestionnaire

        wizard = PlacementQuestionnaire()
        wizard.intensity_type = "weekend"
        wizard.toggle_prep_area("dsa")
        wizard.set_level("dsa", "intermediate")
        wizard.goals = "Clear the coding rounds at two firms"

        restored = PlacementQuestionnaire(wizard.to_preferences())

        assert restored.intensity_type == "weekend"
        assert restored.current_levels == {"dsa": "intermediate"}


# ─────────────────────────────────────────────────────────────────────────────
# Submission and Type Selection Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSubmission:
    """Tests for wizard submission and roadmap type selection."""

    def _ready(self):
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()
        wizard.set_field_of_study("Physics")
        wizard.experience_level = "beginner"
        wizard.toggle_interest("Astrophysics")
        wizard.goals = "Model dark matter halos in dwarf galaxies"
        wizard.step = 4
        return wizard

    def test_submit_calls_back_with_preferences(self):
        """Test that submitting passes the preferences to the callback."""
        wizard = self._ready()
        callback = Mock(return_value="ok")

        assert wizard.submit(callback) == "ok"
        callback.assert_called_once()
        assert callback.call_args.args[0].field_of_study == "Physics"
        assert wizard.is_submitting is False

    def test_duplicate_submit_ignored(self):
        """Test that a submission in flight blocks another."""
        wizard = self._ready()
        wizard.is_submitting = True
        callback = Mock()

        assert wizard.submit(callback) is None
        callback.assert_not_called()

    def test_incomplete_submit_ignored(self):
        """Test that an incomplete last step is not submitted."""
        wizard = self._ready()
        wizard.goals = "too short"
        callback = Mock()

        assert wizard.submit(callback) is None
        callback.assert_not_called()

    def test_submit_before_last_step_ignored(self):
        """Submitting from an earlier step sends nothing."""
        from researchconnect.roadmap.questionnaire import ResearchQuestionnaire

        wizard = ResearchQuestionnaire()
        wizard.set_field_of_study("Physics")
        wizard.experience_level = "beginner"
        callback = Mock(return_value="sent")

        assert wizard.step == 1
        assert wizard.submit(callback) is None
        callback.assert_not_called()

    def test_submit_error_propagates_and_resets(self):
        """Test that a failing callback raises and clears the in-flight flag."""
        from researchconnect.api.errors import ApiConnectionError

        wizard = self._ready()

        with pytest.raises(ApiConnectionError):
            wizard.submit(Mock(side_effect=ApiConnectionError("down")))
        assert wizard.is_submitting is False

    def test_questionnaire_for(self):
        """Test choosing the questionnaire by roadmap kind."""
        from researchconnect.roadmap.questionnaire import (
            PlacementQuestionnaire,
            ResearchQuestionnaire,
            questionnaire_for,
        )

        assert isinstance(questionnaire_for("placement"), PlacementQuestionnaire)
        assert isinstance(questionnaire_for("research"), ResearchQuestionnaire)
        with pytest.raises(ValueError):
            questionnaire_for("astrology")

    def test_type_selector(self):
        """Test the roadmap type selector."""
        from researchconnect.roadmap.questionnaire import (
            PlacementQuestionnaire,
            RoadmapTypeSelector,
        )

        selector = RoadmapTypeSelector()
        with pytest.raises(ValueError):
            selector.questionnaire()

        assert selector.select("placement") == "placement"
        assert isinstance(selector.questionnaire(), PlacementQuestionnaire)

        selector.clear()
        assert selector.selected is None


# ─────────────────────────────────────────────────────────────────────────────
# Layout Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestLayout:
    """Tests for roadmap graph layout."""

    @pytest.fixture
    def layout(self, sample_roadmap_data):
        from researchconnect.roadmap.layout import layout_roadmap
        from researchconnect.shared.schemas import RoadmapStructure

        return layout_roadmap(RoadmapStructure.from_payload(sample_roadmap_data))

    def test_levels_become_rows(self, layout):
        """Test that each level becomes a centred row."""
        positions = {n.id: (n.x, n.y) for n in layout.nodes}

        assert positions == {
            "1": (-200, 0),
            "2": (200, 0),
            "3": (0, 280),
            "4": (0, 560),
            "5": (0, 840),
        }

    def test_unknown_category_not_placed(self, layout):
        """Test that a node with an unknown category is not placed."""
        assert layout.get("6") is None
        assert layout.get("2").level == 0

    def test_edges(self, layout):
        """Test that edges are kept whenever their target is placed."""
        assert [e.id for e in layout.edges] == ["1-2", "1-3", "2-4", "3-4", "4-5", "6-1"]

    def test_edge_colours_follow_source(self, layout):
        """Test that edges take the colour of their source category."""
        from researchconnect.roadmap.layout import DEFAULT_COLOR

        colours = {e.id: e.color for e in layout.edges}

        assert colours["1-2"] == "#3b82f6"
        assert colours["3-4"] == "#10b981"
        assert colours["6-1"] == DEFAULT_COLOR

    def test_empty_levels_take_no_space(self):
        """Test that empty levels add no vertical space."""
        from researchconnect.roadmap.layout import layout_roadmap
        from researchconnect.shared.schemas import RoadmapStructure

        structure = RoadmapStructure.from_payload(
            {"nodes": [{"id": "a", "category": "core"}, {"id": "b", "category": "specialization"}]}
        )

        layout = layout_roadmap(structure)

        assert [(n.id, n.y, n.level) for n in layout.nodes] == [("a", 0, 1), ("b", 280, 3)]

    def test_ordered_steps(self, sample_roadmap_data):
        """Test listing placed nodes in level order."""
        from researchconnect.roadmap.layout import ordered_steps
        from researchconnect.shared.schemas import RoadmapStructure

        steps = ordered_steps(RoadmapStructure.from_payload(json.dumps(sample_roadmap_data)))

        assert [s.title for s in steps] == [
            "Linear Algebra",
            "Quantum Mechanics",
            "Quantum Circuits",
            "Error Correction",
            "Surface Codes",
        ]

    @pytest.mark.parametrize(
        "resource,kind",
        [
            ("3Blue1Brown YouTube series", "video"),
            ("Coursera course on quantum computing", "course"),
            ("LeetCode practice problems", "website"),
            ("Qiskit website", "website"),
            ("Nielsen & Chuang textbook", "reading"),
        ],
    )
    def test_resource_kind(self, resource, kind):
        """Test guessing the kind of a resource."""
        from researchconnect.roadmap.layout import resource_kind

        assert resource_kind(resource) == kind


# ─────────────────────────────────────────────────────────────────────────────
# Service Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestRoadmapService:
    """Tests for RoadmapService against a mock client."""

    def test_load_preferences_missing(self):
        """Test that missing preferences load as None."""
        from researchconnect.api.errors import NotFoundError
        from researchconnect.roadmap.service import RoadmapService

        client = Mock()
        client.get_preferences.side_effect = NotFoundError(404, "No preferences")

        assert RoadmapService(client).load_preferences("research") is None

    def test_load_placement_preferences(self):
        """Test loading placement preferences."""
        from researchconnect.roadmap.service import RoadmapService

        client = Mock()
        client.get_placement_preferences.return_value = "saved"

        assert RoadmapService(client).load_preferences("placement") == "saved"
        client.get_preferences.assert_not_called()

    def test_save_rejects_wrong_preferences_type(self):
        """Test that preferences of the wrong kind raise TypeError."""
        from researchconnect.roadmap.service import RoadmapService
        from researchconnect.shared.schemas import ResearchPreferences

        prefs = ResearchPreferences(field_of_study="Physics", experience_level="beginner", goals="g")

        with pytest.raises(TypeError):
            RoadmapService(Mock()).save_preferences("placement", prefs)

    def test_save_and_generate(self, sample_roadmap_data):
        """Test saving preferences and then generating."""
        from researchconnect.roadmap.service import RoadmapService
        from researchconnect.shared.schemas import (
            PlacementPreferences,
            RoadmapResult,
            RoadmapStructure,
        )

        client = Mock()
        client.generate_placement_roadmap.return_value = RoadmapResult(
            roadmap=RoadmapStructure.from_payload(sample_roadmap_data), cached=True
        )
        prefs = PlacementPreferences(intensity_type="regular", goals="Get placed")

        result = RoadmapService(client).save_and_generate("placement", prefs)

        client.save_placement_preferences.assert_called_once_with(prefs)
        assert result.cached is True
        assert result.roadmap.title == "Quantum Research Path"

    def test_history_skips_unreadable_entries(self, sample_roadmap_data):
        """Test that history skips entries that fail to decode."""
        from researchconnect.roadmap.service import RoadmapService

        client = Mock()
        client.get_roadmap_history.return_value = [
            {"id": 2, "roadmap_data": json.dumps(sample_roadmap_data)},
            {"id": 1, "roadmap_data": "{not json"},
        ]

        history = RoadmapService(client).history()

        assert [entry["id"] for entry in history] == [2]
        assert len(history[0]["roadmap"].nodes) == 6
