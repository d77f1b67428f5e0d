from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from cyberduel.engine.match import MatchState
from cyberduel.engine.serialize import config_to_dict, record_to_dict, result_to_dict


@dataclass
class TelemetryService:
    path: Path

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def log_match(self, state: MatchState) -> None:
        """Record a finished (or aborted) match: one line per round, then the result."""
        for record in state.rounds:
            self.log("round_resolved", record_to_dict(record))
        if state.phase == "aborted":
            self.log("match_aborted", {"kind": state.error_kind, "error": state.error})
            return
        self.log(
            "match_finished",
            {
                "config": config_to_dict(state.config),
                "rounds": len(state.rounds),
                "result": result_to_dict(state.outcome),
            },
        )
