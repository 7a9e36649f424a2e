"""Static fixture loading.

Fixtures are JSON or YAML files looked up by stem, first in a configured
directory and then among the samples shipped with the package.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

FIXTURE_SUFFIXES = (".json", ".yaml", ".yml")


class FixtureLoader:
    """Load named fixtures and cache the parsed content."""

    def __init__(self, fixtures_dir: str | Path | None = None) -> None:
        self.fixtures_dir = Path(fixtures_dir) if fixtures_dir else None
        self._cache: dict[str, Any] = {}

    def load(self, name: str) -> Any:
        """Return the parsed fixture called name.

        Raises:
            FileNotFoundError: If no fixture with that name exists.
        """
        if name not in self._cache:
            self._cache[name] = self._read(name)
        return self._cache[name]

    def available(self) -> list[str]:
        names: set[str] = set()
        for directory in self._search_paths():
            for suffix in FIXTURE_SUFFIXES:
                names.update(p.stem for p in directory.glob(f"*{suffix}"))
        return sorted(names)

    def _search_paths(self) -> list[Path]:
        paths = []
        if self.fixtures_dir is not None and self.fixtures_dir.is_dir():
            paths.append(self.fixtures_dir)
        paths.append(Path(str(resources.files("shopqa.data") / "fixtures")))
        return paths

    def _read(self, name: str) -> Any:
        for directory in self._search_paths():
            for suffix in FIXTURE_SUFFIXES:
                path = directory / f"{name}{suffix}"
                if path.is_file():
                    logger.debug(f"Loading fixture {path}")
                    with open(path, encoding="utf-8") as f:
                        if suffix == ".json":
                            return json.load(f)
                        return yaml.safe_load(f)
        raise FileNotFoundError(f"Fixture '{name}' not found")
