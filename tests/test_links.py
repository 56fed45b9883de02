import pytest

from prettycite.core.editor import strip_brackets
from prettycite.core.links import (
    CitationVariant,
    citation_at,
    iter_citations,
    parse_link,
    search,
    spans_on_line,
)


def test_bracketed_link_with_page() -> None:
    span = search("[[cite:CoxeterPG2ed][53]]")

    assert span is not None
    assert span.start == 0
    assert span.end == 25
    assert span.link.variant is CitationVariant.CITE
    assert span.link.keys == "CoxeterPG2ed"
    assert span.link.page == "53"
    assert span.link.prepage == ""
    assert span.link.postpage == ""
    assert span.link.has_page_bracket


def test_link_offsets_point_inside_the_markup() -> None:
    text = "See [[textcite:doe2020][see::12-14::fig. 3]] here"
    span = search(text)

    assert span is not None
    assert text[span.start : span.variant_end] == "[[textcite"
    assert text[span.start : span.keys_end] == "[[textcite:doe2020"
    assert span.page_end is not None
    assert text[span.start : span.page_end] == "[[textcite:doe2020][see::12-14"
    assert span.text == "[[textcite:doe2020][see::12-14::fig. 3]]"
    assert span.link.prepage == "see"
    assert span.link.page == "12-14"
    assert span.link.postpage == "fig. 3"


def test_missing_page_segment_yields_empty_fields() -> None:
    link = parse_link("[[citetitle:CoxeterPG2ed]]")

    assert link is not None
    assert link.variant is CitationVariant.CITETITLE
    assert link.page == ""
    assert link.prepage == ""
    assert link.postpage == ""
    assert not link.has_page_bracket
    assert not link.has_locator


def test_empty_page_bracket_is_kept_apart_from_missing_bracket() -> None:
    link = parse_link("[[cite:a][]]")

    assert link is not None
    assert link.has_page_bracket
    assert link.page == ""


def test_key_lists_accept_single_and_multiple_keys() -> None:
    single = parse_link("[[cite:alpha]]")
    several = parse_link("[[cite:alpha,beta-2,gamma_3]]")

    assert single is not None and single.key_list == ("alpha",)
    assert several is not None
    assert several.key_list == ("alpha", "beta-2", "gamma_3")


def test_ampersand_prefixed_keys() -> None:
    link = parse_link("[[cite:&alpha]]")

    assert link is not None
    assert link.keys == "alpha"


@pytest.mark.parametrize(
    ("raw", "variant"),
    [
        ("[[citetitle:x]]", CitationVariant.CITETITLE),
        ("[[citeauthor*:x]]", CitationVariant.STAR_CITEAUTHOR),
        ("[[Parencite:x]]", CitationVariant.CAP_PARENCITE),
        ("[[parencites:x]]", CitationVariant.PARENCITES),
    ],
)
def test_longest_variant_wins(raw: str, variant: CitationVariant) -> None:
    link = parse_link(raw)

    assert link is not None
    assert link.variant is variant


def test_variant_style_normalises_case_and_star() -> None:
    assert CitationVariant.CAP_PARENCITE.style == "parencite"
    assert CitationVariant.STAR_CITEAUTHOR.style == "citeauthor"
    assert CitationVariant.CITE.style == "cite"


def test_unknown_variant_is_not_matched() -> None:
    assert search("[[file:notes.org]]") is None
    assert parse_link("[[foocite:x]]") is None


def test_variant_inside_a_word_is_not_matched() -> None:
    assert search("we excite:electrons") is None


def test_bare_form_is_recognised_by_the_grammar() -> None:
    span = search("as in cite:doe2020 and more")

    assert span is not None
    assert span.text == "cite:doe2020"


def test_iter_citations_finds_every_link() -> None:
    text = "[[cite:a]] then [[parencite:b][3]] and [[citeyear:c]]"
    keys = [span.link.keys for span in iter_citations(text)]

    assert keys == ["a", "b", "c"]


def test_spans_on_line_stays_on_the_current_line() -> None:
    text = "[[cite:a]]\n[[cite:b]] [[cite:c]]\n[[cite:d]]"
    offset = text.index("[[cite:c]]")

    assert [span.link.keys for span in spans_on_line(text, offset)] == ["b", "c"]


def test_citation_at_includes_both_boundaries() -> None:
    text = "x [[cite:a]] y"

    assert citation_at(text, 2) is not None
    assert citation_at(text, 12) is not None
    assert citation_at(text, 1) is None
    assert citation_at(text, 13) is None


def test_stripping_round_trip_preserves_variant_and_keys() -> None:
    stripped = strip_brackets("[[citeauthor:alpha,beta]]")
    reparsed = parse_link(stripped)

    assert stripped == "citeauthor:alpha,beta"
    assert reparsed is not None
    assert reparsed.variant is CitationVariant.CITEAUTHOR
    assert reparsed.keys == "alpha,beta"
