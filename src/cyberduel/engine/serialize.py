from __future__ import annotations

from typing import Mapping, cast

from .match import MatchConfig, MatchResult, MatchState, RoundRecord
from .player import CombatantState
from .types import OverrideTag, StatusFlag


def _pair(raw: object) -> tuple[object, object]:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"Expected a pair, got {raw!r}")
    return raw[0], raw[1]


def _flags(raw: object) -> frozenset[StatusFlag]:
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"Expected a status list, got {raw!r}")
    return frozenset(cast(StatusFlag, f) for f in raw)


def config_to_dict(cfg: MatchConfig) -> dict[str, object]:
    # An injected rng is not serializable; the seed stands in for it
    return {
        "starting_hp": cfg.starting_hp,
        "hand_size": cfg.hand_size,
        "max_rounds": cfg.max_rounds,
        "starting_distance": cfg.starting_distance,
        "seed": cfg.seed,
    }


def config_from_dict(d: Mapping[str, object]) -> MatchConfig:
    return MatchConfig(
        starting_hp=int(cast(int, d["starting_hp"])),
        hand_size=int(cast(int, d["hand_size"])),
        max_rounds=int(cast(int, d["max_rounds"])),
        starting_distance=int(cast(int, d["starting_distance"])),
        seed=int(cast(int, d["seed"])),
    )


def record_to_dict(r: RoundRecord) -> dict[str, object]:
    return {
        "round": r.round,
        "cards": list(r.cards),
        "distance_before": r.distance_before,
        "distance_after": r.distance_after,
        "damage": list(r.damage),
        "blocked": list(r.blocked),
        "negated": list(r.negated),
        "statuses_before": [sorted(s) for s in r.statuses_before],
        "statuses_applied": [sorted(s) for s in r.statuses_applied],
        "hp_after": list(r.hp_after),
        "priority_winner": r.priority_winner,
        "overrides": [[player, tag] for player, tag in r.overrides],
    }


def record_from_dict(d: Mapping[str, object]) -> RoundRecord:
    c0, c1 = _pair(d["cards"])
    dmg0, dmg1 = _pair(d["damage"])
    blk0, blk1 = _pair(d["blocked"])
    neg0, neg1 = _pair(d["negated"])
    sb0, sb1 = _pair(d["statuses_before"])
    sa0, sa1 = _pair(d["statuses_applied"])
    hp0, hp1 = _pair(d["hp_after"])
    overrides_raw = d.get("overrides", [])
    if not isinstance(overrides_raw, list):
        raise ValueError("overrides must be a list")
    overrides: list[tuple[int, OverrideTag]] = []
    for item in overrides_raw:
        player, tag = _pair(item)
        overrides.append((int(cast(int, player)), cast(OverrideTag, tag)))
    winner = d.get("priority_winner")
    return RoundRecord(
        round=int(cast(int, d["round"])),
        cards=(str(c0), str(c1)),
        distance_before=int(cast(int, d["distance_before"])),
        distance_after=int(cast(int, d["distance_after"])),
        damage=(int(cast(int, dmg0)), int(cast(int, dmg1))),
        blocked=(int(cast(int, blk0)), int(cast(int, blk1))),
        negated=(bool(neg0), bool(neg1)),
        statuses_before=(_flags(sb0), _flags(sb1)),
        statuses_applied=(_flags(sa0), _flags(sa1)),
        hp_after=(int(cast(int, hp0)), int(cast(int, hp1))),
        priority_winner=None if winner is None else int(cast(int, winner)),
        overrides=tuple(overrides),
    )


def result_to_dict(res: MatchResult | None) -> dict[str, object] | None:
    if res is None:
        return None
    return {"kind": res.kind, "winner": res.winner, "loser": res.loser, "reason": res.reason}


def _combatant_to_dict(p: CombatantState) -> dict[str, object]:
    return {
        "player": p.player,
        "hp": p.hp,
        "deck": list(p.deck),
        "hand": list(p.hand),
        "discard": list(p.discard),
        "statuses": sorted(p.statuses),
    }


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current match state."""
    return {
        "config": config_to_dict(state.config),
        "phase": state.phase,
        "round": state.round,
        "distance": state.distance.value,
        "players": [_combatant_to_dict(p) for p in state.players],
        "history": [record_to_dict(r) for r in state.rounds],
        "result": result_to_dict(state.outcome),
        "error_kind": state.error_kind,
        "pending": list(state.pending),
        "choice_log": [[player, tag] for player, tag in state.choice_log],
    }
