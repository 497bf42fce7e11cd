"""JSON file store holding local AppRole role state between CLI runs."""

from __future__ import annotations

from pathlib import Path
from urllib import parse as urllib_parse

from services.state.approle_role.domain import RoleState

DEFAULT_STATE_DIR = Path.home() / ".local" / "state" / "approle"


class JsonStateStore:
    """One JSON document per role path under a state directory.

    File names are the percent-encoded role path, so every canonical path maps
    to exactly one file.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def load(self, path: str) -> RoleState:
        """Return stored state for ``path``, or the absent state."""
        target = self._file_for(path)
        if not target.exists():
            return RoleState()
        return RoleState.model_validate_json(target.read_text(encoding="utf-8"))

    def save(self, path: str, state: RoleState) -> None:
        """Persist ``state`` for ``path``; an absent state removes the record."""
        target = self._file_for(path)
        if not state.exists:
            target.unlink(missing_ok=True)
            return
        self._root.mkdir(parents=True, exist_ok=True)
        scratch = target.with_suffix(".json.tmp")
        scratch.write_text(state.model_dump_json(indent=2), encoding="utf-8")
        scratch.replace(target)

    def _file_for(self, path: str) -> Path:
        return self._root / (urllib_parse.quote(path.strip("/"), safe="") + ".json")
