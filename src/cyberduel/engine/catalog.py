from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .errors import UnknownCardType
from .types import IDLE_TAG, MoveCard


@dataclass(frozen=True)
class CardCatalog:
    """Immutable registry of every move card, keyed by tag."""

    cards: dict[str, MoveCard]

    def lookup(self, tag: str) -> MoveCard:
        try:
            return self.cards[tag]
        except KeyError:
            raise UnknownCardType(tag) from None

    def all_tags(self) -> Sequence[str]:
        return list(self.cards.keys())

    def legal_moves(self, hand: Iterable[str], distance: int) -> frozenset[MoveCard]:
        """Cards in `hand` whose distance precondition holds at `distance`."""
        return frozenset(
            card for card in (self.lookup(tag) for tag in hand) if card.legal_at(distance)
        )

    def starting_deck(self) -> list[str]:
        # Catalog order, so a seeded shuffle is reproducible
        deck: list[str] = []
        for tag, card in self.cards.items():
            deck.extend([tag] * card.copies)
        return deck

    @property
    def idle(self) -> MoveCard:
        return self.lookup(IDLE_TAG)
