from __future__ import annotations

import itertools

from cyberduel.engine.resolver import mirror, resolve
from cyberduel.engine.types import MAX_DISTANCE, MIN_DISTANCE, MoveCard, MoveEffect
from cyberduel.paths import get_paths
from cyberduel.services.content import ContentService

STATUS_COMBOS = [
    frozenset(),
    frozenset({"stunned"}),
    frozenset({"exposed"}),
    frozenset({"stunned", "exposed"}),
]


def _load_catalog():
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog()


def test_resolve_is_swap_symmetric_for_every_legal_pair() -> None:
    catalog = _load_catalog()
    cards = [catalog.lookup(t) for t in catalog.all_tags()]
    checked = 0
    for distance in range(MIN_DISTANCE, MAX_DISTANCE + 1):
        legal = [c for c in cards if c.legal_at(distance)]
        for a, b in itertools.product(legal, repeat=2):
            for sa, sb in itertools.product(STATUS_COMBOS, repeat=2):
                out = resolve(a, b, distance, sa, sb)
                assert out == mirror(resolve(b, a, distance, sb, sa)), (a.tag, b.tag, distance, sa, sb)
                assert MIN_DISTANCE <= distance + out.distance_delta <= MAX_DISTANCE
                assert out.damage_a >= 0 and out.damage_b >= 0
                checked += 1
    assert checked > 0


def test_mirror_is_an_involution() -> None:
    catalog = _load_catalog()
    out = resolve(catalog.lookup("honeypot"), catalog.lookup("exploit"), 2)
    assert mirror(mirror(out)) == out


def test_patch_blocks_exploit_without_exposure() -> None:
    catalog = _load_catalog()
    out = resolve(catalog.lookup("exploit"), catalog.lookup("patch"), 2)
    assert out.damage_b == 0
    assert out.blocked_b == 1
    assert out.damage_a == 0
    assert out.distance_delta == -1
    assert out.overrides == frozenset()


def test_zero_day_bypasses_patch_when_exposed() -> None:
    catalog = _load_catalog()
    out = resolve(
        catalog.lookup("exploit"), catalog.lookup("patch"), 2, frozenset(), frozenset({"exposed"})
    )
    assert out.damage_b == 1
    assert out.blocked_b == 0
    assert ("a", "zero_day") in out.overrides


def test_disconnect_evades_and_wins_distance_conflict() -> None:
    catalog = _load_catalog()
    out = resolve(catalog.lookup("exploit"), catalog.lookup("disconnect"), 2)
    assert out.negated_b
    assert out.damage_b == 0
    assert ("b", "air_gap") in out.overrides
    # Exploit advances 1, Disconnect retreats 2 with higher priority
    assert out.priority_winner == "b"
    assert out.distance_delta == 2


def test_stunned_disconnect_cannot_evade_or_move() -> None:
    catalog = _load_catalog()
    out = resolve(
        catalog.lookup("exploit"), catalog.lookup("disconnect"), 2, frozenset(), frozenset({"stunned"})
    )
    assert not out.negated_b
    assert out.damage_b == 1
    assert out.priority_winner is None
    assert out.distance_delta == -1


def test_ddos_floods_through_disconnect() -> None:
    catalog = _load_catalog()
    out = resolve(catalog.lookup("ddos"), catalog.lookup("disconnect"), 3)
    assert out.damage_b == 1
    assert out.statuses_b == frozenset({"stunned"})
    assert ("a", "flood") in out.overrides
    assert ("b", "air_gap") not in out.overrides
    assert out.distance_delta == 2


def test_honeypot_reflects_an_attack() -> None:
    catalog = _load_catalog()
    out = resolve(catalog.lookup("honeypot"), catalog.lookup("exploit"), 2)
    assert out.negated_a
    assert out.damage_a == 0
    assert out.damage_b == 1
    assert out.statuses_b == frozenset({"exposed"})
    assert out.overrides == frozenset({("a", "honeypot")})


def test_exposed_honeypot_fails() -> None:
    catalog = _load_catalog()
    out = resolve(
        catalog.lookup("honeypot"), catalog.lookup("exploit"), 2, frozenset({"exposed"}), frozenset()
    )
    assert out.damage_a == 1
    assert out.damage_b == 0
    assert ("b", "zero_day") in out.overrides


def test_blocked_hit_does_not_stun() -> None:
    catalog = _load_catalog()
    out = resolve(catalog.lookup("ddos"), catalog.lookup("firewall"), 4)
    assert out.damage_b == 0
    assert out.statuses_b == frozenset()


def test_recon_exposes_through_firewall_but_not_patch() -> None:
    catalog = _load_catalog()
    fw = resolve(catalog.lookup("recon"), catalog.lookup("firewall"), 3)
    assert fw.statuses_b == frozenset({"exposed"})
    # Recon advances with lower priority than Firewall's retreat
    assert fw.priority_winner == "b"
    assert fw.distance_delta == 1

    patched = resolve(catalog.lookup("recon"), catalog.lookup("patch"), 3)
    assert patched.statuses_b == frozenset()


def test_equal_priority_conflicting_moves_cancel() -> None:
    lunge = MoveCard("lunge", "Lunge", 1, 5, 2, MoveEffect(distance_delta=-2))
    dodge = MoveCard("dodge", "Dodge", 1, 5, 2, MoveEffect(distance_delta=1))
    out = resolve(lunge, dodge, 3)
    assert out.priority_winner is None
    assert out.distance_delta == -1


def test_distance_delta_is_clamped_to_track() -> None:
    catalog = _load_catalog()
    out = resolve(catalog.lookup("disconnect"), catalog.lookup("firewall"), 4)
    assert out.distance_delta == MAX_DISTANCE - 4

    both_advance = resolve(catalog.lookup("exploit"), catalog.lookup("exploit"), 1)
    assert both_advance.distance_delta == 0
    assert both_advance.damage_a == 1 and both_advance.damage_b == 1
