"""Unit tests for the story prompt and draft parsing."""

import json

import pytest

from cuentos.config import STORY_CONSTANTS
from cuentos.core.errors import UpstreamError
from cuentos.core.prompts import (
    DEFAULT_REJECTION_REASON,
    STORY_RESPONSE_SCHEMA,
    build_story_prompt,
    parse_story_draft,
)
from cuentos.core.types import AcceptedDraft, RejectedDraft


class TestBuildStoryPrompt:

    def test_embeds_concept_and_interest(self):
        prompt = build_story_prompt("la fotosíntesis", "el fútbol")

        assert '"la fotosíntesis"' in prompt
        assert '"el fútbol"' in prompt

    def test_states_story_constraints(self):
        prompt = build_story_prompt("gravity", "space")

        assert str(STORY_CONSTANTS["min_word_count"]) in prompt
        assert f"EXACTLY {STORY_CONSTANTS['image_count']}" in prompt
        assert "Rioplatense" in prompt
        assert "SAFETY RULES" in prompt


class TestResponseSchema:

    def test_outcome_is_the_only_required_field(self):
        assert STORY_RESPONSE_SCHEMA["required"] == ["outcome"]
        assert STORY_RESPONSE_SCHEMA["properties"]["outcome"]["enum"] == ["accepted", "rejected"]


class TestParseStoryDraft:

    def test_accepted(self, genai):
        draft = parse_story_draft(json.dumps(genai.accepted_story()))

        assert isinstance(draft, AcceptedDraft)
        assert draft.title == "Messi y la fotosíntesis"
        assert draft.moral_or_fact == "Las plantas convierten la luz en energía."
        assert draft.image_prompts == ["scene one", "scene two", "scene three"]

    def test_rejected_keeps_reason(self):
        draft = parse_story_draft(json.dumps({"outcome": "rejected", "rejectionReason": " No podemos. "}))

        assert draft == RejectedDraft(reason="No podemos.")

    @pytest.mark.parametrize("reason", [None, "", "   ", 42])
    def test_rejected_without_reason_uses_default(self, reason):
        draft = parse_story_draft(json.dumps({"outcome": "rejected", "rejectionReason": reason}))

        assert draft == RejectedDraft(reason=DEFAULT_REJECTION_REASON)

    def test_non_string_prompts_are_dropped(self, genai):
        payload = genai.accepted_story(["one", 2, None, "three"])

        draft = parse_story_draft(json.dumps(payload))

        assert draft.image_prompts == ["one", "three"]

    def test_missing_prompts_give_empty_list(self, genai):
        payload = genai.accepted_story()
        payload["imagePrompts"] = None

        assert parse_story_draft(json.dumps(payload)).image_prompts == []

    @pytest.mark.parametrize(
        "text",
        [
            None,
            "",
            "not json",
            "[1, 2, 3]",
            json.dumps({"outcome": "maybe"}),
            json.dumps({"title": "no outcome"}),
        ],
    )
    def test_unusable_answers_raise(self, text):
        with pytest.raises(UpstreamError):
            parse_story_draft(text)

    @pytest.mark.parametrize("missing", ["title", "content", "moralOrFact"])
    def test_accepted_missing_text_field_raises(self, genai, missing):
        payload = genai.accepted_story()
        payload[missing] = ""

        with pytest.raises(UpstreamError):
            parse_story_draft(json.dumps(payload))
