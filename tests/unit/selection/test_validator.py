"""Tests for selection boundary validation and correction."""

from __future__ import annotations

from readmark.config import ValidationConfig
from readmark.selection.validator import SelectionSnapshot, ValidationResult, validate
from readmark.text.spaces import TextSpaces, derive_spaces
from tests.conftest import LINK_DOC

SENTENCES = "First one. The quick brown fox. Last."


def _snapshot(
    rendered: tuple[int, int], cleaned: tuple[int, int], text: str = ""
) -> SelectionSnapshot:
    return SelectionSnapshot(
        dom_start=rendered[0],
        dom_end=rendered[1],
        rendered_start=rendered[0],
        rendered_end=rendered[1],
        cleaned_start=cleaned[0],
        cleaned_end=cleaned[1],
        selected_text=text,
    )


def _validate(
    spaces: TextSpaces,
    snapshot: SelectionSnapshot,
    config: ValidationConfig | None = None,
) -> ValidationResult:
    return validate(
        snapshot,
        spaces.cleaned,
        spaces.rendered,
        spaces.to_cleaned,
        spaces.to_rendered,
        config=config,
    )


def _revalidate(spaces: TextSpaces, result: ValidationResult) -> ValidationResult:
    """Feed a corrected result back in as a fresh selection."""
    snapshot = _snapshot(
        (result.rendered_start, result.rendered_end),
        (result.cleaned_start, result.cleaned_end),
        spaces.rendered[result.rendered_start : result.rendered_end],
    )
    return _validate(spaces, snapshot)


class TestValidateLinks:
    """Selections that split a link."""

    def test_selection_splitting_link_expands_to_link_and_words(self) -> None:
        """Start inside the link snaps to the link; end stays after "and"."""
        spaces = derive_spaces(LINK_DOC)
        # rendered "A and"; the cleaned start is just inside "[A](...)"
        result = _validate(spaces, _snapshot((4, 9), (5, 29), "A and"))

        assert result.debug_info.boundaries.start_in_link
        assert not result.debug_info.boundaries.end_in_link
        assert any("inside a link" in w for w in result.warnings)
        assert (result.cleaned_start, result.cleaned_end) == (4, 29)
        assert spaces.cleaned[4:29] == "[A](http://a.com/(x)) and"
        assert (result.rendered_start, result.rendered_end) == (4, 9)
        assert result.was_corrected

    def test_end_inside_link_url_expands_to_link_end(self) -> None:
        """An end edge inside the URL moves past the closing parenthesis."""
        spaces = derive_spaces(LINK_DOC)
        result = _validate(spaces, _snapshot((0, 5), (0, 12)))

        assert result.debug_info.boundaries.end_in_link
        assert result.cleaned_end == 25
        assert result.rendered_end == 5

    def test_corrected_output_is_stable(self) -> None:
        """Validating the corrected output makes no further corrections."""
        spaces = derive_spaces(LINK_DOC)
        first = _validate(spaces, _snapshot((4, 9), (5, 29), "A and"))
        second = _revalidate(spaces, first)

        assert second.corrections == []
        assert (second.cleaned_start, second.cleaned_end) == (
            first.cleaned_start,
            first.cleaned_end,
        )


class TestValidateWords:
    """Selections inside words."""

    def test_clean_selection_is_untouched(self) -> None:
        """A whole-word selection with agreeing spaces is returned as-is."""
        spaces = derive_spaces(SENTENCES)
        result = _validate(spaces, _snapshot((15, 20), (15, 20), "quick"))

        assert result.corrections == []
        assert result.warnings == []
        assert (result.cleaned_start, result.cleaned_end) == (15, 20)
        assert result.debug_info.boundaries.is_safe

    def test_mid_word_selection_expands_to_word(self) -> None:
        """A partial word grows to the whole word only."""
        spaces = derive_spaces(SENTENCES)
        result = _validate(spaces, _snapshot((16, 19), (16, 19), "uic"))

        assert (result.rendered_start, result.rendered_end) == (15, 20)
        assert (result.cleaned_start, result.cleaned_end) == (15, 20)
        assert any("word" in c for c in result.corrections)
        assert _revalidate(spaces, result).corrections == []


class TestValidateDrift:
    """Selections whose cleaned and rendered positions disagree."""

    def test_small_drift_is_tolerated(self) -> None:
        """Drift within tolerance is not a warning."""
        spaces = derive_spaces(SENTENCES)
        result = _validate(spaces, _snapshot((15, 20), (16, 20)))
        assert not any("drift" in w for w in result.warnings)

    def test_drift_expands_to_sentence(self) -> None:
        """Drift beyond tolerance snaps the selection to its sentence."""
        spaces = derive_spaces(SENTENCES)
        result = _validate(spaces, _snapshot((15, 20), (21, 26)))

        assert any("drift" in w for w in result.warnings)
        assert any("sentence" in c for c in result.corrections)
        assert spaces.rendered[result.rendered_start : result.rendered_end] == (
            "The quick brown fox."
        )
        assert (result.cleaned_start, result.cleaned_end) == (11, 31)
        assert result.debug_info.round_trip["rendered"] == (21, 26)
        assert _revalidate(spaces, result).corrections == []

    def test_double_round_trip_drift_warns(self) -> None:
        """A cleaned end in a link URL comes back past the link and is reported."""
        spaces = derive_spaces(LINK_DOC)
        result = _validate(spaces, _snapshot((0, 5), (0, 12)))

        assert result.debug_info.round_trip["cleaned"] == (0, 25)
        assert any("Double round-trip" in w for w in result.warnings)
        assert not any(w.startswith("End position drift") for w in result.warnings)

    def test_sentence_expansion_respects_limit(self) -> None:
        """Expansion that would reach the limit is skipped."""
        spaces = derive_spaces(SENTENCES)
        config = ValidationConfig(sentence_expansion_limit=10)
        result = _validate(spaces, _snapshot((15, 20), (21, 26)), config)

        assert not any("sentence" in c for c in result.corrections)
        assert (result.rendered_start, result.rendered_end) == (15, 20)
        assert (result.cleaned_start, result.cleaned_end) == (15, 20)

    def test_sentence_expansion_can_be_disabled(self) -> None:
        """Drift still warns when sentence expansion is off."""
        spaces = derive_spaces(SENTENCES)
        config = ValidationConfig(sentence_expansion_on_drift=False)
        result = _validate(spaces, _snapshot((15, 20), (21, 26)), config)

        assert any("drift" in w for w in result.warnings)
        assert (result.cleaned_start, result.cleaned_end) == (15, 20)


class TestValidateRobustness:
    """Inputs that must not raise."""

    def test_out_of_range_positions_are_clamped(self) -> None:
        """Positions beyond the text are clamped with a warning."""
        spaces = derive_spaces(SENTENCES)
        result = _validate(spaces, _snapshot((0, 999), (0, 999)))

        assert any("clamped" in w for w in result.warnings)
        assert result.rendered_end == len(SENTENCES)
        assert result.cleaned_end == len(SENTENCES)

    def test_empty_document(self) -> None:
        """An empty document validates to an empty selection."""
        spaces = derive_spaces("")
        result = _validate(spaces, _snapshot((0, 0), (0, 0)))
        assert (result.cleaned_start, result.cleaned_end) == (0, 0)
        assert result.corrections == []
