"""Pure matchup resolution between two revealed move cards.

Each round is resolved as two independent strikes, A's card acting on B and
B's card acting on A, so swapping the arguments mirrors the outcome exactly.
Overrides are checked before base effects, in a fixed order:

  air_gap   defender's Disconnect negates the strike, unless the defender is
            stunned or the striking card floods
  honeypot  defender's Honeypot negates a damaging strike and reflects 1
            unblockable damage plus "exposed", unless the defender is exposed
  zero_day  striking Exploit ignores block when the defender is exposed
  flood     striking DDoS cannot be negated by air_gap
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .types import MAX_DISTANCE, MIN_DISTANCE, MoveCard, OverrideTag, Side, StatusFlag

Statuses = frozenset[StatusFlag]

HONEYPOT_REFLECT_DAMAGE = 1
NO_STATUS: Statuses = frozenset()


@dataclass(frozen=True)
class Outcome:
    damage_a: int = 0
    damage_b: int = 0
    distance_delta: int = 0
    statuses_a: Statuses = NO_STATUS
    statuses_b: Statuses = NO_STATUS
    blocked_a: int = 0
    blocked_b: int = 0
    negated_a: bool = False
    negated_b: bool = False
    priority_winner: Side | None = None
    overrides: frozenset[tuple[Side, OverrideTag]] = field(default_factory=frozenset)


@dataclass(frozen=True)
class _Strike:
    """Effect of one card on the opposing combatant."""

    damage: int = 0
    blocked: int = 0
    status: StatusFlag | None = None
    negated: bool = False
    # (True if the striker owns it, tag)
    triggered: tuple[tuple[bool, OverrideTag], ...] = ()


def _flip(side: Side) -> Side:
    return "b" if side == "a" else "a"


def _strike(
    striker: MoveCard,
    defender: MoveCard,
    striker_status: Statuses,
    defender_status: Statuses,
) -> _Strike:
    triggered: list[tuple[bool, OverrideTag]] = []
    eff = striker.effect

    if defender.has_override("air_gap") and "stunned" not in defender_status:
        if striker.has_override("flood"):
            triggered.append((True, "flood"))
        else:
            triggered.append((False, "air_gap"))
            return _Strike(negated=True, triggered=tuple(triggered))

    if (
        defender.has_override("honeypot")
        and eff.damage > 0
        and "exposed" not in defender_status
    ):
        triggered.append((False, "honeypot"))
        return _Strike(negated=True, triggered=tuple(triggered))

    # Reflection is the striker's Honeypot answering the defender's attack
    if (
        striker.has_override("honeypot")
        and defender.effect.damage > 0
        and "exposed" not in striker_status
    ):
        status: StatusFlag | None = None if defender.effect.cleanse else "exposed"
        return _Strike(damage=HONEYPOT_REFLECT_DAMAGE, status=status, triggered=tuple(triggered))

    block = defender.effect.block
    if striker.has_override("zero_day") and "exposed" in defender_status:
        triggered.append((True, "zero_day"))
        block = 0

    damage = max(0, eff.damage - block)
    blocked = eff.damage - damage

    status = None
    if eff.inflicts is not None and not defender.effect.cleanse:
        connects = damage > 0 if eff.damage > 0 else True
        if connects:
            status = eff.inflicts

    return _Strike(damage=damage, blocked=blocked, status=status, triggered=tuple(triggered))


def _distance(
    card_a: MoveCard,
    card_b: MoveCard,
    status_a: Statuses,
    status_b: Statuses,
) -> tuple[int, Side | None]:
    stunned_a = "stunned" in status_a
    stunned_b = "stunned" in status_b
    delta_a = 0 if stunned_a else card_a.effect.distance_delta
    delta_b = 0 if stunned_b else card_b.effect.distance_delta
    prio_a = 0 if stunned_a else card_a.priority
    prio_b = 0 if stunned_b else card_b.priority

    conflicting = delta_a * delta_b < 0
    if conflicting and prio_a != prio_b:
        return (delta_a, "a") if prio_a > prio_b else (delta_b, "b")
    # Same direction, or a priority tie: both movements happen
    return delta_a + delta_b, None


def resolve(
    card_a: MoveCard,
    card_b: MoveCard,
    distance: int,
    status_a: Statuses = NO_STATUS,
    status_b: Statuses = NO_STATUS,
) -> Outcome:
    """Resolve a revealed pair of cards.

    Both cards are assumed legal at `distance`. The returned distance delta is
    already clamped so that `distance + delta` stays on the track.
    `status_a`/`status_b` are the statuses each combatant carries into the
    round; the outcome's statuses are the ones newly inflicted by it.
    """
    on_b = _strike(card_a, card_b, status_a, status_b)
    on_a = _strike(card_b, card_a, status_b, status_a)

    net, winner = _distance(card_a, card_b, status_a, status_b)
    target = max(MIN_DISTANCE, min(MAX_DISTANCE, distance + net))

    strikes: tuple[tuple[Side, _Strike], ...] = (("a", on_b), ("b", on_a))
    overrides: set[tuple[Side, OverrideTag]] = set()
    for striker_side, strike in strikes:
        for by_striker, tag in strike.triggered:
            overrides.add((striker_side if by_striker else _flip(striker_side), tag))

    return Outcome(
        damage_a=on_a.damage,
        damage_b=on_b.damage,
        distance_delta=target - distance,
        statuses_a=frozenset({on_a.status}) if on_a.status else NO_STATUS,
        statuses_b=frozenset({on_b.status}) if on_b.status else NO_STATUS,
        blocked_a=on_a.blocked,
        blocked_b=on_b.blocked,
        negated_a=on_a.negated,
        negated_b=on_b.negated,
        priority_winner=winner,
        overrides=frozenset(overrides),
    )


def mirror(outcome: Outcome) -> Outcome:
    """Swap the roles of A and B. Distance is shared, so its delta is kept."""
    return Outcome(
        damage_a=outcome.damage_b,
        damage_b=outcome.damage_a,
        distance_delta=outcome.distance_delta,
        statuses_a=outcome.statuses_b,
        statuses_b=outcome.statuses_a,
        blocked_a=outcome.blocked_b,
        blocked_b=outcome.blocked_a,
        negated_a=outcome.negated_b,
        negated_b=outcome.negated_a,
        priority_winner=None if outcome.priority_winner is None else _flip(outcome.priority_winner),
        overrides=frozenset((_flip(side), tag) for side, tag in outcome.overrides),
    )
