"""Selection boundary validation and auto-correction.

Runs when the user commits a selection, before it is used to extract text
for editing or to persist a mark. The selection arrives as the same gesture
expressed in rendered and cleaned space; the validator checks that the two
agree and that neither edge splits a word or a link, then snaps edges
outward to safe boundaries.

Problems are expected here (every selection touching a link produces one),
so nothing raises: the caller gets best-effort positions plus warnings and
diagnostics and decides whether to proceed.
"""

# Pattern: Functional Core (converters injected, no state)

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from readmark.config import ValidationConfig
from readmark.text.boundaries import (
    expand_to_sentence_boundaries,
    expand_to_word_boundaries,
    is_whitespace_boundary,
)
from readmark.text.links import LinkSpan, find_all_links, link_containing

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionSnapshot:
    """One selection gesture expressed in every space, before correction."""

    dom_start: int
    dom_end: int
    rendered_start: int
    rendered_end: int
    cleaned_start: int
    cleaned_end: int
    selected_text: str = ""


@dataclass(frozen=True)
class BoundaryAnalysis:
    """Safety of each selection edge."""

    start_word_safe: bool
    end_word_safe: bool
    start_in_link: bool
    end_in_link: bool

    @property
    def is_safe(self) -> bool:
        return (
            self.start_word_safe
            and self.end_word_safe
            and not self.start_in_link
            and not self.end_in_link
        )


@dataclass(frozen=True)
class PositionDebugInfo:
    """Diagnostics attached to every validation.

    Attributes:
        original: Input positions, keyed ``rendered``/``cleaned``.
        round_trip: Recomputed positions: ``rendered`` from the input cleaned
            positions, ``cleaned`` from those again.
        boundaries: Edge analysis of the input selection.
    """

    original: dict[str, tuple[int, int]]
    round_trip: dict[str, tuple[int, int]]
    boundaries: BoundaryAnalysis


@dataclass(frozen=True)
class ValidationResult:
    """Corrected positions with the reasons they moved."""

    rendered_start: int
    rendered_end: int
    cleaned_start: int
    cleaned_end: int
    debug_info: PositionDebugInfo
    warnings: list[str] = field(default_factory=list)
    corrections: list[str] = field(default_factory=list)

    @property
    def was_corrected(self) -> bool:
        return bool(self.corrections)


def _clamp(pos: int, length: int) -> int:
    return max(0, min(pos, length))


def _analyse(
    rendered: str,
    links: list[LinkSpan],
    rendered_span: tuple[int, int],
    cleaned_span: tuple[int, int],
) -> BoundaryAnalysis:
    return BoundaryAnalysis(
        start_word_safe=is_whitespace_boundary(
            rendered, rendered_span[0], is_end=False
        ),
        end_word_safe=is_whitespace_boundary(rendered, rendered_span[1], is_end=True),
        start_in_link=link_containing(cleaned_span[0], links) is not None,
        end_in_link=link_containing(cleaned_span[1], links) is not None,
    )


def _expand_to_links(
    start: int, end: int, links: list[LinkSpan]
) -> tuple[int, int]:
    """Move cleaned-space edges that split a link to its outer boundary."""
    start_link = link_containing(start, links)
    if start_link is not None:
        start = start_link.start_index
    end_link = link_containing(end, links)
    if end_link is not None:
        end = end_link.end_index
    return start, end


def validate(
    snapshot: SelectionSnapshot,
    cleaned: str,
    rendered: str,
    to_cleaned: Callable[[int], int],
    to_rendered: Callable[[int], int],
    *,
    config: ValidationConfig | None = None,
) -> ValidationResult:
    """Check a selection's cross-space consistency and correct unsafe edges.

    Args:
        snapshot: The selection as captured from the UI.
        cleaned: Cleaned-space document text.
        rendered: Rendered-space document text.
        to_cleaned: Rendered -> cleaned position converter.
        to_rendered: Cleaned -> rendered position converter.
        config: Tuning; defaults to ``ValidationConfig()``.

    Returns:
        Corrected rendered and cleaned spans. Unchanged when the input
        selection had no problems.
    """
    if config is None:
        config = ValidationConfig()
    tolerance = config.drift_tolerance
    warnings: list[str] = []
    corrections: list[str] = []

    rs = _clamp(snapshot.rendered_start, len(rendered))
    re_ = _clamp(snapshot.rendered_end, len(rendered))
    cs = _clamp(snapshot.cleaned_start, len(cleaned))
    ce = _clamp(snapshot.cleaned_end, len(cleaned))
    if (rs, re_, cs, ce) != (
        snapshot.rendered_start,
        snapshot.rendered_end,
        snapshot.cleaned_start,
        snapshot.cleaned_end,
    ):
        warnings.append("Selection positions outside the document were clamped")
    if rs > re_:
        rs, re_ = re_, rs
    if cs > ce:
        cs, ce = ce, cs

    # 1. Round trip cleaned -> rendered (-> cleaned, diagnostics only)
    rt_rs, rt_re = to_rendered(cs), to_rendered(ce)
    rt_cs, rt_ce = to_cleaned(rt_rs), to_cleaned(rt_re)
    start_drift = abs(rt_rs - rs)
    end_drift = abs(rt_re - re_)
    drift_detected = start_drift > tolerance or end_drift > tolerance
    if start_drift > tolerance:
        warnings.append(f"Start position drift of {start_drift} characters")
    if end_drift > tolerance:
        warnings.append(f"End position drift of {end_drift} characters")
    cleaned_start_drift = abs(rt_cs - cs)
    cleaned_end_drift = abs(rt_ce - ce)
    if cleaned_start_drift > tolerance or cleaned_end_drift > tolerance:
        warnings.append(
            f"Double round-trip drift in cleaned space: start "
            f"{cleaned_start_drift}, end {cleaned_end_drift}"
        )

    # 2. Boundary analysis
    links = find_all_links(cleaned)
    boundaries = _analyse(rendered, links, (rs, re_), (cs, ce))
    if boundaries.start_in_link:
        warnings.append("Selection start is inside a link")
    if boundaries.end_in_link:
        warnings.append("Selection end is inside a link")

    debug_info = PositionDebugInfo(
        original={"rendered": (rs, re_), "cleaned": (cs, ce)},
        round_trip={"rendered": (rt_rs, rt_re), "cleaned": (rt_cs, rt_ce)},
        boundaries=boundaries,
    )

    if warnings:
        logger.debug("Selection [%d, %d) warnings: %s", rs, re_, warnings)

    if not drift_detected and boundaries.is_safe:
        return ValidationResult(
            rendered_start=rs,
            rendered_end=re_,
            cleaned_start=cs,
            cleaned_end=ce,
            debug_info=debug_info,
            warnings=warnings,
        )

    # 3. Correction. Every step only grows the span, so this settles.
    if drift_detected:
        # The rendered positions came from the gesture itself
        cs, ce = to_cleaned(rs), to_cleaned(re_)
    while True:
        link_cs, link_ce = _expand_to_links(cs, ce, links)
        if (link_cs, link_ce) != (cs, ce):
            corrections.append(
                f"Expanded to full link: cleaned [{cs}, {ce}) -> "
                f"[{link_cs}, {link_ce})"
            )
            cs, ce = link_cs, link_ce
            rs, re_ = to_rendered(cs), to_rendered(ce)

        word_rs, word_re = expand_to_word_boundaries(rs, re_, rendered)
        if (word_rs, word_re) == (rs, re_):
            break
        corrections.append(
            f"Expanded to word boundaries: rendered [{rs}, {re_}) -> "
            f"[{word_rs}, {word_re})"
        )
        rs, re_ = word_rs, word_re
        cs, ce = to_cleaned(rs), to_cleaned(re_)

    if drift_detected and config.sentence_expansion_on_drift:
        sent_rs, sent_re = expand_to_sentence_boundaries(rs, re_, rendered)
        if (sent_rs, sent_re) != (rs, re_):
            if sent_re - sent_rs < config.sentence_expansion_limit:
                corrections.append(
                    f"Expanded to sentence boundaries: rendered [{rs}, {re_}) -> "
                    f"[{sent_rs}, {sent_re})"
                )
                rs, re_ = sent_rs, sent_re
            else:
                logger.debug(
                    "Skipped sentence expansion: %d chars >= limit %d",
                    sent_re - sent_rs,
                    config.sentence_expansion_limit,
                )

    # 4. Cleaned positions follow the final rendered ones, then re-verify
    cs, ce = _expand_to_links(to_cleaned(rs), to_cleaned(re_), links)
    final_rs, final_re = to_rendered(cs), to_rendered(ce)
    residual = max(abs(final_rs - rs), abs(final_re - re_))
    if residual > tolerance:
        warnings.append(f"Residual drift of {residual} characters after correction")
        logger.warning(
            "Residual drift %d after correcting selection to cleaned [%d, %d)",
            residual,
            cs,
            ce,
        )

    logger.debug(
        "Selection corrected to rendered [%d, %d) cleaned [%d, %d): %s",
        rs,
        re_,
        cs,
        ce,
        corrections,
    )
    return ValidationResult(
        rendered_start=rs,
        rendered_end=re_,
        cleaned_start=cs,
        cleaned_end=ce,
        debug_info=debug_info,
        warnings=warnings,
        corrections=corrections,
    )
