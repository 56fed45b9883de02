from collections.abc import Mapping
from typing import Any

import pytest

from prettycite.core.bibliography import BibliographyCollection
from prettycite.core.config import PrettifyConfig
from prettycite.core.document import TextDocument
from prettycite.core.engine import DecorationEngine


BIBTEX = """
@book{CoxeterPG2ed,
    author = {Coxeter, H.S.M.},
    year = {1987},
    title = {Projective Geometry},
}
@article{doe2020,
    author = {Doe, Jane},
    year = {2020},
    title = {Notes},
}
@article{roe2021,
    author = {Roe, Richard},
    date = {2021-04-01},
}
"""


class RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []
        self.warnings: list[str] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


@pytest.fixture
def bibliography() -> BibliographyCollection:
    collection = BibliographyCollection()
    collection.load_string(BIBTEX)
    return collection


def _engine(
    text: str,
    bibliography: BibliographyCollection,
    config: PrettifyConfig | None = None,
    emitter: RecordingEmitter | None = None,
) -> tuple[TextDocument, DecorationEngine]:
    document = TextDocument(text)
    engine = DecorationEngine(document, bibliography, config, emitter=emitter)
    engine.enable()
    return document, engine


def test_cite_with_page(bibliography: BibliographyCollection) -> None:
    document, _ = _engine("[[cite:CoxeterPG2ed][53]]", bibliography)

    assert document.display_text() == "Coxeter, 1987, p. 53"
    assert document.text == "[[cite:CoxeterPG2ed][53]]"


def test_citetitle(bibliography: BibliographyCollection) -> None:
    document, _ = _engine("[[citetitle:CoxeterPG2ed]]", bibliography)

    assert document.display_text() == "Projective Geometry"


def test_parencite_with_page_range(bibliography: BibliographyCollection) -> None:
    document, _ = _engine("[[parencite:CoxeterPG2ed][36-44]]", bibliography)

    assert document.display_text() == "(Coxeter, 1987, pp. 36-44)"


def test_decorates_links_in_running_text(bibliography: BibliographyCollection) -> None:
    document, engine = _engine(
        "As [[textcite:doe2020]] notes,\nsee [[parencite:doe2020,roe2021]].",
        bibliography,
    )

    assert document.display_text() == "As Doe (2020) notes,\nsee (Doe, 2020; Roe, 2021)."
    assert len(engine.overrides) == 2


def test_unresolved_key_leaves_link_undecorated(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("See [[cite:nobody]].", bibliography)

    assert document.display_text() == "See [[cite:nobody]]."
    assert engine.overrides == ()


def test_bare_citations_are_not_decorated(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("See cite:doe2020 here.", bibliography)

    assert document.display_text() == "See cite:doe2020 here."
    assert engine.resolver.lookup_count == 0


def test_refresh_is_idempotent(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("[[cite:doe2020]] and [[cite:nobody]]", bibliography)
    lookups = engine.resolver.lookup_count
    overrides = engine.overrides

    engine.refresh()
    engine.refresh()

    assert engine.resolver.lookup_count == lookups == 2
    assert engine.overrides == overrides
    assert document.display_text() == "Doe, 2020 and [[cite:nobody]]"


def test_disable_restores_raw_text(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("x [[cite:doe2020]] y", bibliography)

    engine.disable()

    assert not engine.enabled
    assert engine.overrides == ()
    assert document.overrides == ()
    assert not engine.cache
    assert document.subscriber_count == 0
    assert document.display_text() == "x [[cite:doe2020]] y"


def test_edits_while_disabled_are_ignored(bibliography: BibliographyCollection) -> None:
    document = TextDocument("[[cite:doe2020]]")
    engine = DecorationEngine(document, bibliography)

    document.insert(0, "> ")

    assert engine.overrides == ()
    assert engine.resolver.lookup_count == 0


def test_editing_keys_invalidates_the_cache(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("See [[cite:doe2020]].", bibliography)
    start = document.text.index("doe2020")

    document.replace(start, start + len("doe2020"), "roe2021")

    assert document.display_text() == "See Roe, 2021."
    assert engine.resolver.lookup_count == 2
    assert [record.keys for record in engine.cache.values()] == ["roe2021"]


def test_appending_a_key_resolves_again(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("[[cite:doe2020]]", bibliography)
    keys_end = document.text.index("]]")

    document.insert(keys_end, ",roe2021")

    assert document.display_text() == "Doe, 2020; Roe, 2021"
    assert engine.resolver.lookup_count == 3


def test_edits_elsewhere_reuse_cached_entries(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("Intro\n[[cite:doe2020]] text", bibliography)

    document.insert(0, "An ")
    document.insert(len(document.text), " more")

    assert engine.resolver.lookup_count == 1
    assert document.display_text() == "An Intro\nDoe, 2020 text more"
    assert list(engine.cache) == [document.text.index("]]")]


def test_overrides_follow_text_inserted_before_them(
    bibliography: BibliographyCollection,
) -> None:
    document, engine = _engine("[[cite:doe2020]]\n[[cite:CoxeterPG2ed]]", bibliography)

    document.insert(0, "Intro: ")

    starts = [override.start for override in engine.overrides]
    assert starts == [7, 24]
    assert document.display_text() == "Intro: Doe, 2020\nCoxeter, 1987"


def test_deleting_a_link_drops_its_override_and_cache(
    bibliography: BibliographyCollection,
) -> None:
    document, engine = _engine("a [[cite:doe2020]] b", bibliography)

    document.delete(2, 18)

    assert document.text == "a  b"
    assert engine.overrides == ()
    assert not engine.cache


def test_typing_a_new_link_decorates_it(bibliography: BibliographyCollection) -> None:
    document, engine = _engine("Text ", bibliography)

    document.insert(len(document.text), "[[citeyear:doe2020]]")

    assert document.display_text() == "Text 2020"


def test_citation_outside_bracket_link_boundaries_is_skipped(
    bibliography: BibliographyCollection,
) -> None:
    document, engine = _engine("[[file:cite:doe2020]]", bibliography)

    assert document.display_text() == "[[file:cite:doe2020]]"
    assert engine.overrides == ()


def test_override_stops_where_the_citation_ends_inside_a_longer_link(
    bibliography: BibliographyCollection,
) -> None:
    document, engine = _engine("[[cite:CoxeterPG2ed][see]] x", bibliography)

    link = document.bracket_link_at(0)
    assert link == (0, 26)
    assert [(o.start, o.end, o.text) for o in engine.overrides] == [
        (0, 20, "Coxeter, 1987")
    ]
    assert engine.overrides[0].end <= link[1]
    assert document.display_text() == "Coxeter, 1987[see]] x"


def test_config_controls_page_spacing(bibliography: BibliographyCollection) -> None:
    config = PrettifyConfig(space_before_page_number=False)
    document, _ = _engine("[[cite:CoxeterPG2ed][53]]", bibliography, config)

    assert document.display_text() == "Coxeter, 1987, p.53"


def test_custom_format_function(bibliography: BibliographyCollection) -> None:
    def shout(link, entries, config) -> str:
        return link.keys.upper()

    config = PrettifyConfig(format_function=shout)
    document, _ = _engine("[[cite:doe2020]]", bibliography, config)

    assert document.display_text() == "DOE2020"


def test_failing_format_function_is_reported(bibliography: BibliographyCollection) -> None:
    def broken(link, entries, config) -> str:
        raise ValueError("boom")

    emitter = RecordingEmitter()
    config = PrettifyConfig(format_function=broken)
    document, engine = _engine("[[cite:doe2020]]", bibliography, config, emitter)

    assert document.display_text() == "[[cite:doe2020]]"
    assert engine.overrides == ()
    assert emitter.warnings == ["Citation format function failed for 'doe2020'"]


def test_render_events_summarise_each_pass(bibliography: BibliographyCollection) -> None:
    emitter = RecordingEmitter()
    _engine("[[cite:doe2020]] [[cite:nobody]]", bibliography, emitter=emitter)

    assert ("citation_lookup_miss", {"key": "nobody"}) in emitter.events
    assert emitter.events[-1] == (
        "citation_render",
        {"matched": 2, "rendered": 1, "lookups": 2},
    )
