"""Unit tests for request validation and credential checks."""

import pytest

from cuentos.api.validation import check_origin, require_api_key, validate_generation_request
from cuentos.core.errors import InvalidInput, Unconfigured


class TestRequireApiKey:

    def test_returns_key(self, api_key):
        assert require_api_key() == api_key

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_key_raises(self, monkeypatch, value):
        if value is None:
            monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        else:
            monkeypatch.setenv("GEMINI_API_KEY", value)

        with pytest.raises(Unconfigured):
            require_api_key()


class TestValidateGenerationRequest:

    def test_valid(self):
        request = validate_generation_request({"concept": "gravity", "interest": "space"})

        assert request.concept == "gravity"
        assert request.interest == "space"

    def test_keeps_whitespace_and_unicode(self):
        request = validate_generation_request({"concept": "  la célula ", "interest": "ñandúes"})

        assert request.concept == "  la célula "

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "concept",
            {},
            {"concept": "gravity"},
            {"interest": "space"},
            {"concept": 1, "interest": "space"},
            {"concept": "gravity", "interest": True},
            {"concept": "", "interest": "space"},
        ],
    )
    def test_invalid(self, payload):
        with pytest.raises(InvalidInput):
            validate_generation_request(payload)

    def test_too_long_names_the_limit(self):
        with pytest.raises(InvalidInput, match="at most 500 characters"):
            validate_generation_request({"concept": "x" * 501, "interest": "space"})

    def test_limit_is_inclusive(self):
        request = validate_generation_request({"concept": "x" * 500, "interest": "y" * 500})

        assert len(request.concept) == 500


class TestCheckOrigin:

    def test_known_origin(self):
        assert check_origin("http://localhost:5173", "1.2.3.4") is True

    def test_missing_origin(self):
        assert check_origin(None, "1.2.3.4") is True

    def test_unknown_origin_is_logged_not_blocked(self, caplog):
        assert check_origin("https://evil.example", "1.2.3.4") is False
        assert "unauthorized origin" in caplog.text
