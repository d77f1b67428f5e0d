from __future__ import annotations

import json
import random

from cyberduel.engine.match import MatchConfig, legal_choices, new_match, replay, submit_choice
from cyberduel.engine.serialize import snapshot
from cyberduel.paths import get_paths
from cyberduel.services.content import ContentService


def _load_catalog():
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog()


def _choose(state, player: int) -> str:
    # deterministic: strongest damage first, then tag order
    cards = sorted(legal_choices(state, player), key=lambda c: (-c.effect.damage, c.tag))
    return cards[0].tag


def test_engine_determinism_replay() -> None:
    catalog = _load_catalog()
    cfg = MatchConfig(starting_hp=6, hand_size=4, max_rounds=15, seed=424242)
    state1 = new_match(cfg, catalog)

    for _ in range(cfg.max_rounds):
        if state1.finished:
            break
        for player in (0, 1):
            res = submit_choice(state1, player, _choose(state1, player))
            assert res.ok

    snap1 = snapshot(state1)
    state2 = replay(state1.choice_log, cfg, catalog)
    snap2 = snapshot(state2)

    assert snap1 == snap2
    assert json.loads(json.dumps(snap1)) == snap1


def test_injected_rng_matches_seed() -> None:
    catalog = _load_catalog()
    seeded = new_match(MatchConfig(seed=7), catalog)
    injected = new_match(MatchConfig(seed=7, rng=random.Random(7)), catalog)
    assert snapshot(seeded)["players"] == snapshot(injected)["players"]
