import pytest

import prettycite
from prettycite import (
    BibliographyCollection,
    CitationPrettifier,
    CursorTarget,
    PrettifyConfig,
    TextDocument,
)


@pytest.fixture
def bibliography() -> BibliographyCollection:
    collection = BibliographyCollection()
    collection.load_string(
        "@book{CoxeterPG2ed, author={Coxeter, H.S.M.}, year={1987}, title={Projective Geometry}}"
    )
    return collection


def test_mode_starts_disabled(bibliography: BibliographyCollection) -> None:
    document = TextDocument("[[cite:CoxeterPG2ed]]")
    prettifier = CitationPrettifier(document, bibliography)

    assert not prettifier.enabled
    assert document.display_text() == "[[cite:CoxeterPG2ed]]"


def test_toggle_switches_decoration(bibliography: BibliographyCollection) -> None:
    document = TextDocument("As shown in [[cite:CoxeterPG2ed][53]].")
    prettifier = CitationPrettifier(document, bibliography)

    assert prettifier.toggle() is True
    assert document.display_text() == "As shown in Coxeter, 1987, p. 53."
    assert prettifier.toggle() is False
    assert document.display_text() == "As shown in [[cite:CoxeterPG2ed][53]]."


def test_command_table_follows_bind_edit_keys(bibliography: BibliographyCollection) -> None:
    document = TextDocument("")
    bound = CitationPrettifier(document, bibliography)
    unbound = CitationPrettifier(
        document, bibliography, PrettifyConfig(bind_edit_keys=False)
    )

    assert set(bound.commands()) == {
        "toggle-mode",
        "edit-link",
        "delete-backward-char",
        "delete-forward-char",
    }
    assert set(unbound.commands()) == {"toggle-mode"}


def test_commands_drive_the_editor(bibliography: BibliographyCollection) -> None:
    document = TextDocument("[[cite:CoxeterPG2ed]] end")
    prompt_calls: list[tuple[str, int]] = []

    def prompt(initial_text: str, cursor_offset: int) -> str:
        prompt_calls.append((initial_text, cursor_offset))
        return "[[citeyear:CoxeterPG2ed][]]"

    prettifier = CitationPrettifier(document, bibliography, prompt=prompt)
    commands = prettifier.commands()
    commands["toggle-mode"]()

    commands["edit-link"](0, CursorTarget.KEYS_END)

    assert prompt_calls == [("[[cite:CoxeterPG2ed]]", len("[[cite:CoxeterPG2ed"))]
    assert document.text == "citeyear:CoxeterPG2ed end"


def test_default_prompt_cancels_edits(bibliography: BibliographyCollection) -> None:
    document = TextDocument("[[cite:CoxeterPG2ed]]")
    prettifier = CitationPrettifier(document, bibliography)

    assert prettifier.edit_link_at(0) is None
    assert document.text == "[[cite:CoxeterPG2ed]]"


def test_whole_link_deletion_through_facade(bibliography: BibliographyCollection) -> None:
    document = TextDocument("[[cite:CoxeterPG2ed]]!")
    prettifier = CitationPrettifier(document, bibliography)
    prettifier.enable()

    assert prettifier.delete_backward_char(21) == 0
    assert document.text == "!"


def test_validated_edits_reject_non_links(bibliography: BibliographyCollection) -> None:
    document = TextDocument("[[cite:CoxeterPG2ed]]")
    prettifier = CitationPrettifier(
        document, bibliography, prompt=lambda text, offset: "nonsense", validate_edits=True
    )

    with pytest.raises(prettycite.MalformedLinkError):
        prettifier.edit_link_at(0)
