from __future__ import annotations

import random
from dataclasses import dataclass, field

from .errors import DeckExhausted, IllegalMove
from .types import StatusFlag

Event = dict[str, object]


@dataclass
class CombatantState:
    player: int
    hp: int
    hand_size: int
    deck: list[str]
    hand: list[str] = field(default_factory=list)
    discard: list[str] = field(default_factory=list)
    statuses: set[StatusFlag] = field(default_factory=set)

    def card_count(self) -> int:
        return len(self.deck) + len(self.hand) + len(self.discard)

    def is_eliminated(self) -> bool:
        return self.hp == 0

    def draw_to_hand_size(self, rng: random.Random) -> list[Event]:
        """Refill the hand, reshuffling the discard pile into the deck as needed.

        Raises DeckExhausted before touching any pile if the deck and discard
        pile together cannot cover the shortfall.
        """
        needed = self.hand_size - len(self.hand)
        if needed <= 0:
            return []
        if len(self.deck) + len(self.discard) < needed:
            raise DeckExhausted(
                f"Player {self.player} needs {needed} cards but only "
                f"{len(self.deck) + len(self.discard)} remain in deck and discard."
            )

        events: list[Event] = []
        for _ in range(needed):
            if not self.deck:
                self.deck = self.discard
                self.discard = []
                rng.shuffle(self.deck)
                events.append({"type": "DECK_RESHUFFLED", "player": self.player, "size": len(self.deck)})
            card_tag = self.deck.pop()
            self.hand.append(card_tag)
            events.append({"type": "CARD_DRAWN", "player": self.player, "card": card_tag})
        return events

    def play_card(self, tag: str) -> None:
        try:
            self.hand.remove(tag)
        except ValueError:
            raise IllegalMove(f"{tag!r} is not in player {self.player}'s hand.") from None
        self.discard.append(tag)

    def discard_hand(self) -> None:
        self.discard.extend(self.hand)
        self.hand.clear()

    def apply_damage(self, amount: int) -> int:
        """Apply damage, clamping hit points at zero. Returns the damage dealt."""
        if amount <= 0:
            return 0
        dealt = min(self.hp, amount)
        self.hp -= dealt
        return dealt

    def apply_status(self, flag: StatusFlag) -> None:
        self.statuses.add(flag)

    def clear_statuses(self) -> None:
        self.statuses.clear()
