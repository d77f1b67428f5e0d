from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Literal

from .catalog import CardCatalog
from .distance import DistanceTrack
from .errors import (
    DeckExhausted,
    EngineError,
    ErrorKind,
    IllegalMove,
    InvalidConfig,
    UnknownCardType,
)
from .player import CombatantState, Event
from .resolver import resolve
from .types import IDLE_TAG, MAX_DISTANCE, MIN_DISTANCE, MoveCard, OverrideTag, Phase, StatusFlag

PLAYERS = (0, 1)


@dataclass(frozen=True)
class MatchConfig:
    starting_hp: int = 5
    hand_size: int = 5
    max_rounds: int = 20
    starting_distance: int = 3
    seed: int = 0
    # Injected randomness source; defaults to random.Random(seed)
    rng: random.Random | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RoundRecord:
    """Immutable audit entry for one resolved round. Tuples are indexed by player."""

    round: int
    cards: tuple[str, str]
    distance_before: int
    distance_after: int
    damage: tuple[int, int]
    blocked: tuple[int, int]
    negated: tuple[bool, bool]
    statuses_before: tuple[frozenset[StatusFlag], frozenset[StatusFlag]]
    statuses_applied: tuple[frozenset[StatusFlag], frozenset[StatusFlag]]
    hp_after: tuple[int, int]
    priority_winner: int | None = None
    overrides: tuple[tuple[int, OverrideTag], ...] = ()


ResultKind = Literal["winner", "draw"]


@dataclass(frozen=True)
class MatchResult:
    kind: ResultKind
    winner: int | None
    loser: int | None
    reason: str  # eliminated | double_elimination | max_rounds


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    error_kind: ErrorKind | None = None


@dataclass(frozen=True)
class CombatantView:
    """What one combatant may observe. The opponent's pending choice is never included."""

    viewer: int
    phase: Phase
    round: int
    distance: int
    hand: tuple[str, ...]
    own_choice: str | None
    hp: tuple[int, int]
    statuses: tuple[frozenset[StatusFlag], frozenset[StatusFlag]]
    opponent_hand_size: int
    legal: frozenset[str]


@dataclass
class MatchState:
    catalog: CardCatalog
    config: MatchConfig
    rng: random.Random
    players: list[CombatantState]
    distance: DistanceTrack
    deck_size: int
    phase: Phase = "awaiting_choices"
    round: int = 1
    pending: list[str | None] = field(default_factory=lambda: [None, None])
    rounds: list[RoundRecord] = field(default_factory=list)
    outcome: MatchResult | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    # Accepted submissions in order; enough to replay the match from its config
    choice_log: list[tuple[int, str]] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def opponent(self, player: int) -> int:
        return 1 - player

    @property
    def finished(self) -> bool:
        return self.phase in ("match_over", "aborted")


def _validate_config(cfg: MatchConfig, deck_size: int) -> None:
    if cfg.starting_hp < 1:
        raise InvalidConfig(f"starting_hp must be positive, got {cfg.starting_hp}.")
    if cfg.hand_size < 1:
        raise InvalidConfig(f"hand_size must be positive, got {cfg.hand_size}.")
    if cfg.hand_size > deck_size:
        raise InvalidConfig(f"hand_size {cfg.hand_size} exceeds the {deck_size}-card deck.")
    if cfg.max_rounds < 1:
        raise InvalidConfig(f"max_rounds must be positive, got {cfg.max_rounds}.")
    if not MIN_DISTANCE <= cfg.starting_distance <= MAX_DISTANCE:
        raise InvalidConfig(
            f"starting_distance must be within [{MIN_DISTANCE}, {MAX_DISTANCE}], "
            f"got {cfg.starting_distance}."
        )


def _abort(state: MatchState, err: EngineError) -> StepResult:
    state.phase = "aborted"
    state.error = str(err)
    state.error_kind = err.kind
    state.event_log.append({"type": "MATCH_ABORTED", "kind": err.kind, "error": str(err)})
    return StepResult(ok=False, events=state.event_log[-1:], error=str(err), error_kind=err.kind)


def _reject(msg: str) -> StepResult:
    return StepResult(ok=False, events=[], error=msg, error_kind=IllegalMove.kind)


def _end_match(state: MatchState, result: MatchResult) -> None:
    state.outcome = result
    state.phase = "match_over"
    state.event_log.append(
        {"type": "MATCH_ENDED", "result": result.kind, "winner": result.winner, "reason": result.reason}
    )


def _check_terminal(state: MatchState) -> MatchResult | None:
    out0 = state.players[0].is_eliminated()
    out1 = state.players[1].is_eliminated()
    if out0 and out1:
        return MatchResult(kind="draw", winner=None, loser=None, reason="double_elimination")
    if out0 or out1:
        loser = 0 if out0 else 1
        return MatchResult(kind="winner", winner=1 - loser, loser=loser, reason="eliminated")
    if state.round >= state.config.max_rounds:
        return MatchResult(kind="draw", winner=None, loser=None, reason="max_rounds")
    return None


def _resolve_round(state: MatchState) -> None:
    tags = (state.pending[0], state.pending[1])
    assert tags[0] is not None and tags[1] is not None

    state.phase = "revealing"
    card_a = state.catalog.lookup(tags[0])
    card_b = state.catalog.lookup(tags[1])
    state.pending = [None, None]
    state.event_log.append({"type": "CARDS_REVEALED", "round": state.round, "cards": [tags[0], tags[1]]})

    state.phase = "resolving"
    p0, p1 = state.players
    before = (frozenset(p0.statuses), frozenset(p1.statuses))
    distance_before = state.distance.value
    outcome = resolve(card_a, card_b, distance_before, before[0], before[1])

    for ps, card in ((p0, card_a), (p1, card_b)):
        if card.tag == IDLE_TAG:
            ps.discard_hand()
        else:
            ps.play_card(card.tag)

    dealt = (p0.apply_damage(outcome.damage_a), p1.apply_damage(outcome.damage_b))
    for player, amount in zip(PLAYERS, dealt):
        if amount:
            state.event_log.append({"type": "DAMAGE_APPLIED", "player": player, "amount": amount})

    # Statuses carried in were consumed by this round
    applied = (outcome.statuses_a, outcome.statuses_b)
    for ps, flags in zip(state.players, applied):
        ps.clear_statuses()
        for flag in sorted(flags):
            ps.apply_status(flag)
            state.event_log.append({"type": "STATUS_APPLIED", "player": ps.player, "status": flag})

    moved = state.distance.move(outcome.distance_delta)
    if moved:
        state.event_log.append(
            {"type": "DISTANCE_CHANGED", "from": distance_before, "to": state.distance.value}
        )

    winner = outcome.priority_winner
    record = RoundRecord(
        round=state.round,
        cards=(card_a.tag, card_b.tag),
        distance_before=distance_before,
        distance_after=state.distance.value,
        damage=dealt,
        blocked=(outcome.blocked_a, outcome.blocked_b),
        negated=(outcome.negated_a, outcome.negated_b),
        statuses_before=before,
        statuses_applied=applied,
        hp_after=(p0.hp, p1.hp),
        priority_winner=None if winner is None else (0 if winner == "a" else 1),
        overrides=tuple(sorted((0 if side == "a" else 1, tag) for side, tag in outcome.overrides)),
    )
    state.rounds.append(record)
    state.event_log.append({"type": "ROUND_RESOLVED", "round": state.round})

    state.phase = "round_complete"
    result = _check_terminal(state)
    if result is not None:
        _end_match(state, result)
        return

    for ps in state.players:
        state.event_log.extend(ps.draw_to_hand_size(state.rng))
    state.round += 1
    state.phase = "awaiting_choices"


def legal_choices(state: MatchState, player: int) -> frozenset[MoveCard]:
    """Cards `player` may submit this round; Idle only when nothing in hand is legal."""
    ps = state.players[player]
    legal = state.catalog.legal_moves(ps.hand, state.distance.value)
    if legal:
        return legal
    return frozenset({state.catalog.idle})


def submit_choice(state: MatchState, player: int, card_tag: str) -> StepResult:
    """Buffer one combatant's choice; resolves the round once both are in.

    Rejected submissions leave the state untouched. An unknown card tag, or a
    deck that cannot be refilled, aborts the match.
    """
    if state.finished:
        return _reject("Match already ended.")
    if player not in PLAYERS:
        return _reject(f"Unknown combatant {player}.")

    try:
        card = state.catalog.lookup(card_tag)
    except UnknownCardType as e:
        return _abort(state, e)

    if state.pending[player] is not None:
        return _reject("Choice already committed this round.")
    if card not in legal_choices(state, player):
        return _reject(
            f"{card.name} is not playable from this hand at distance {state.distance.value}."
        )

    start = len(state.event_log)
    state.pending[player] = card.tag
    state.choice_log.append((player, card.tag))

    if state.pending[0] is not None and state.pending[1] is not None:
        try:
            _resolve_round(state)
        except (UnknownCardType, DeckExhausted) as e:
            return _abort(state, e)

    return StepResult(ok=True, events=state.event_log[start:])


def current_phase(state: MatchState) -> Phase:
    return state.phase


def result(state: MatchState) -> MatchResult | None:
    """Final result once the match is over, otherwise None."""
    return state.outcome


def history(state: MatchState) -> tuple[RoundRecord, ...]:
    return tuple(state.rounds)


def view(state: MatchState, viewer: int) -> CombatantView:
    me = state.players[viewer]
    them = state.players[state.opponent(viewer)]
    legal: frozenset[str] = frozenset()
    if state.phase == "awaiting_choices":
        legal = frozenset(card.tag for card in legal_choices(state, viewer))
    return CombatantView(
        viewer=viewer,
        phase=state.phase,
        round=state.round,
        distance=state.distance.value,
        hand=tuple(me.hand),
        own_choice=state.pending[viewer],
        hp=(state.players[0].hp, state.players[1].hp),
        statuses=(frozenset(state.players[0].statuses), frozenset(state.players[1].statuses)),
        opponent_hand_size=len(them.hand),
        legal=legal,
    )


def new_match(config: MatchConfig | None = None, catalog: CardCatalog | None = None) -> MatchState:
    if catalog is None:
        from cyberduel.services.content import load_default_catalog

        catalog = load_default_catalog()
    cfg = config or MatchConfig()
    deck = catalog.starting_deck()
    _validate_config(cfg, len(deck))
    catalog.lookup(IDLE_TAG)

    rng = cfg.rng if cfg.rng is not None else random.Random(cfg.seed)
    players: list[CombatantState] = []
    for player in PLAYERS:
        cards = list(deck)
        rng.shuffle(cards)
        players.append(CombatantState(player=player, hp=cfg.starting_hp, hand_size=cfg.hand_size, deck=cards))

    state = MatchState(
        catalog=catalog,
        config=cfg,
        rng=rng,
        players=players,
        distance=DistanceTrack(cfg.starting_distance),
        deck_size=len(deck),
    )
    state.event_log.append(
        {"type": "MATCH_STARTED", "seed": cfg.seed, "distance": cfg.starting_distance, "hp": cfg.starting_hp}
    )
    for ps in players:
        state.event_log.extend(ps.draw_to_hand_size(rng))
    return state


def replay(
    choices: Iterable[tuple[int, str]],
    config: MatchConfig | None = None,
    catalog: CardCatalog | None = None,
) -> MatchState:
    """Rebuild a match by resubmitting its accepted choices in order."""
    state = new_match(config=config, catalog=catalog)
    for player, tag in choices:
        if state.finished:
            break
        submit_choice(state, player, tag)
    return state
