from __future__ import annotations

import pytest

from cyberduel.engine.errors import UnknownCardType
from cyberduel.paths import get_paths
from cyberduel.services.content import ContentService, load_default_catalog


def _load_catalog():
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog()


def test_lookup_unknown_tag_is_fatal_error() -> None:
    catalog = _load_catalog()
    with pytest.raises(UnknownCardType) as exc:
        catalog.lookup("rootkit")
    assert exc.value.fatal
    assert exc.value.tag == "rootkit"


def test_legal_moves_filters_by_distance() -> None:
    catalog = _load_catalog()
    hand = ["breach", "ddos", "recon", "patch", "patch"]
    assert {c.tag for c in catalog.legal_moves(hand, 1)} == {"breach", "patch"}
    assert {c.tag for c in catalog.legal_moves(hand, 4)} == {"ddos", "recon", "patch"}
    assert catalog.legal_moves([], 3) == frozenset()


def test_legal_moves_rejects_unknown_tags() -> None:
    catalog = _load_catalog()
    with pytest.raises(UnknownCardType):
        catalog.legal_moves(["patch", "zeroclick"], 2)


def test_starting_deck_never_contains_idle() -> None:
    catalog = _load_catalog()
    deck = catalog.starting_deck()
    assert len(deck) == 18
    assert "idle" not in deck
    assert deck.count("exploit") == 3
    assert catalog.idle.tag == "idle"


def test_default_catalog_matches_service() -> None:
    assert load_default_catalog() == _load_catalog()
