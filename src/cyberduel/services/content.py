from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from cyberduel.engine.catalog import CardCatalog
from cyberduel.engine.types import IDLE_TAG, MoveCard, MoveEffect
from cyberduel.paths import get_paths


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key, 0)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _parse_effect(raw: Mapping[str, object]) -> MoveEffect:
    inflicts = raw.get("inflicts")
    override = raw.get("override")
    return MoveEffect(
        distance_delta=_optional_int(raw, "distance_delta"),
        damage=_optional_int(raw, "damage"),
        block=_optional_int(raw, "block"),
        # schema restricts values
        inflicts=inflicts if isinstance(inflicts, str) else None,  # type: ignore[arg-type]
        cleanse=bool(raw.get("cleanse", False)),
        override=override if isinstance(override, str) else None,  # type: ignore[arg-type]
    )


def parse_catalog(raw: object) -> CardCatalog:
    if not isinstance(raw, dict):
        raise ContentError("cards.json must be an object")
    raw_cards = raw.get("cards")
    if not isinstance(raw_cards, list):
        raise ContentError("cards.json.cards must be a list")

    cards: dict[str, MoveCard] = {}
    for item in raw_cards:
        if not isinstance(item, dict):
            continue
        tag = _require_str(item, "tag")
        if tag in cards:
            raise ContentError(f"Duplicate card tag: {tag}")
        raw_effect = item.get("effect", {})
        if not isinstance(raw_effect, dict):
            raise ContentError(f"effect of {tag} must be an object")
        card = MoveCard(
            tag=tag,
            name=_require_str(item, "name"),
            min_distance=_require_int(item, "min_distance"),
            max_distance=_require_int(item, "max_distance"),
            priority=_require_int(item, "priority"),
            effect=_parse_effect(raw_effect),
            copies=_require_int(item, "copies"),
            rules_text=str(item.get("rules_text", "")),
        )
        if card.min_distance > card.max_distance:
            raise ContentError(f"{tag}: min_distance exceeds max_distance")
        cards[tag] = card

    if IDLE_TAG not in cards:
        raise ContentError(f"Catalog must define the {IDLE_TAG!r} card")
    if cards[IDLE_TAG].copies:
        raise ContentError(f"{IDLE_TAG!r} is never dealt and must have 0 copies")
    return CardCatalog(cards=cards)


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_catalog(self) -> CardCatalog:
        cards_path = self._data_dir / "cards.json"
        schema_path = self._schema_dir / "cards.schema.json"
        raw = _load_json(cards_path)
        schema = _load_schema(schema_path)
        validate_json(raw, schema, context=str(cards_path))
        return parse_catalog(raw)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()


def load_default_catalog() -> CardCatalog:
    """The canonical card set shipped with the package."""
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir).load_catalog()
