"""
ExplanationService: prompt construction, confidence heuristic, fallback policy.
"""
import pytest

from ai.explainer import (
    ExplanationService,
    build_explanation_prompt,
    compute_confidence,
    count_lines,
)
from schemas.explanation import ExplanationRequest
from utils.constants import FALLBACK_EXPLANATION
from utils.errors import ConfigurationError, UpstreamError, UpstreamStatusError


class TestBuildExplanationPrompt:

    def test_simple_mode_includes_language_and_code(self):
        prompt = build_explanation_prompt("x = 1", "python", None, "simple")
        assert prompt == "Explain this python code in simple terms:\nx = 1"

    def test_detailed_mode_asks_for_five_parts(self):
        prompt = build_explanation_prompt("int x;", "c", None, "detailed")
        assert prompt.startswith("Explain this c code in detail, including:")
        for part in (
            "1. What each line does",
            "2. The algorithm/logic being used",
            "3. Time and space complexity",
            "4. Potential improvements",
            "5. Common pitfalls to avoid",
        ):
            assert part in prompt
        assert prompt.endswith("Code:\nint x;")

    def test_simple_mode_line_focus(self):
        prompt = build_explanation_prompt("a\nb", "go", 2, "simple")
        assert prompt.endswith("\n\nFocus on line 2:")

    def test_detailed_mode_line_focus(self):
        prompt = build_explanation_prompt("a\nb", "go", 1, "detailed")
        assert prompt.endswith("\n\nFocus specifically on line 1:")

    def test_no_focus_without_line_number(self):
        assert "Focus" not in build_explanation_prompt("a", "go", None, "detailed")

    def test_is_pure(self):
        args = ("for i in range(3): print(i)", "python", 1, "detailed")
        assert build_explanation_prompt(*args) == build_explanation_prompt(*args)


class TestConfidence:

    @pytest.mark.parametrize("code,expected", [
        ("x=1", 1),
        ("x=1\ny=2", 2),
        ("x=1\ny=2\n", 3),
        ("\n", 2),
    ])
    def test_count_lines(self, code, expected):
        assert count_lines(code) == expected

    def test_formula_without_reply(self):
        assert compute_confidence(2, 0) == 81

    def test_formula_with_reply(self):
        # 85 - 2*1 + 100/20 = 88
        assert compute_confidence(1, 100) == 88

    def test_half_rounds_up(self):
        # 85 - 4 + 10/20 = 81.5
        assert compute_confidence(2, 10) == 82
        # 85 - 6 + 10/20 = 79.5
        assert compute_confidence(3, 10) == 80

    def test_clamped_to_upper_bound(self):
        assert compute_confidence(1, 10_000) == 95

    def test_clamped_to_lower_bound(self):
        assert compute_confidence(500, 0) == 60

    def test_always_an_integer_in_range(self):
        for lines in range(1, 80, 9):
            for length in range(0, 4000, 333):
                value = compute_confidence(lines, length)
                assert isinstance(value, int)
                assert 60 <= value <= 95


class TestExplanationService:

    def test_empty_reply_uses_fallback(self, settings, make_fake):
        fake = make_fake(reply="")
        service = ExplanationService(settings, fake)

        result = service.explain(ExplanationRequest(code="x=1\ny=2", language="python", mode="simple"))

        assert result.explanation == FALLBACK_EXPLANATION
        assert result.confidence == 81

    def test_whitespace_reply_uses_fallback(self, settings, make_fake):
        service = ExplanationService(settings, make_fake(reply="  \n "))
        result = service.explain(ExplanationRequest(code="x=1", language="python"))
        assert result.explanation == FALLBACK_EXPLANATION
        assert result.confidence == 83

    def test_reply_text_is_returned_and_scored(self, settings, make_fake):
        reply = "Assigns one to x. " * 10          # 180 chars
        service = ExplanationService(settings, make_fake(reply=reply))

        result = service.explain(ExplanationRequest(code="x=1\ny=2\nz=3", language="python"))

        assert result.explanation == reply
        # 85 - 6 + 180/20 = 88
        assert result.confidence == 88

    def test_upstream_status_error_degrades_to_fallback(self, settings, make_fake):
        fake = make_fake(error=UpstreamStatusError("Generation API returned HTTP 500", status=500))
        service = ExplanationService(settings, fake)

        result = service.explain(ExplanationRequest(code="x=1", language="python"))

        assert result.explanation == FALLBACK_EXPLANATION
        assert result.confidence == 83

    def test_transport_failure_propagates(self, settings, make_fake):
        fake = make_fake(error=UpstreamError("Could not connect to the generation API"))
        service = ExplanationService(settings, fake)

        with pytest.raises(UpstreamError) as exc_info:
            service.explain(ExplanationRequest(code="x=1", language="python"))
        assert not isinstance(exc_info.value, UpstreamStatusError)

    def test_missing_key_fails_before_any_call(self, no_key_settings, make_fake):
        fake = make_fake(reply="unused")
        service = ExplanationService(no_key_settings, fake)

        with pytest.raises(ConfigurationError, match="GEMINI_API_KEY not found"):
            service.explain(ExplanationRequest(code="x=1", language="python"))
        assert fake.calls == []

    def test_generation_settings_and_prompt(self, settings, make_fake):
        fake = make_fake(reply="ok")
        service = ExplanationService(settings, fake)

        service.explain(ExplanationRequest(code="a\nb", language="rust", line_number=2, mode="detailed"))

        assert len(fake.calls) == 1
        call = fake.calls[0]
        assert call["temperature"] == 0.7
        assert call["max_output_tokens"] == 1000
        assert call["prompt"] == build_explanation_prompt("a\nb", "rust", 2, "detailed")


class TestExplanationRequest:

    def test_mode_defaults_to_simple(self):
        assert ExplanationRequest(code="x", language="js").mode == "simple"

    def test_null_mode_defaults_to_simple(self):
        assert ExplanationRequest.model_validate({"code": "x", "language": "js", "mode": None}).mode == "simple"

    def test_camel_case_line_number(self):
        req = ExplanationRequest.model_validate({"code": "x", "language": "js", "lineNumber": 4})
        assert req.line_number == 4

    @pytest.mark.parametrize("body", [
        {"code": "", "language": "js"},
        {"code": "   \n", "language": "js"},
        {"code": "x", "language": "js", "mode": "verbose"},
        {"code": "x", "language": "js", "lineNumber": 0},
        {"code": "x"},
    ])
    def test_rejects_invalid_bodies(self, body):
        with pytest.raises(ValueError):
            ExplanationRequest.model_validate(body)
