"""Project configuration file consumed by the capture and compare stages."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .models import Target, Viewport

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_OPTIONS: Dict[str, Any] = {
    "waitTime": 3000,
    "threshold": 0.1,
    "includeAA": False,
    "diffMask": [255, 0, 255],
}


class ProjectConfigError(ValueError):
    """Raised when a project configuration fails validation."""

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("Configuration validation failed:\n" + "\n".join(self.errors))


def _default_targets() -> List[Dict[str, Any]]:
    return [Target(name="homepage", url="/").to_dict()]


@dataclass
class ProjectConfig:
    """Base URL, capture targets and comparison options of a project.

    Targets are kept as plain dictionaries so that a hand-edited file with
    missing fields can still be loaded and reported on by :meth:`validate`.
    """

    base_url: str = DEFAULT_BASE_URL
    targets: List[Dict[str, Any]] = field(default_factory=_default_targets)
    options: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_OPTIONS))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "targets": self.targets,
            "options": self.options,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json() + "\n", encoding="utf-8")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ProjectConfig":
        """Merges user values over the defaults; ``options`` are merged key by key."""

        options = copy.deepcopy(DEFAULT_OPTIONS)
        options.update(raw.get("options") or {})
        return cls(
            base_url=raw.get("baseUrl") or DEFAULT_BASE_URL,
            targets=list(raw.get("targets") or _default_targets()),
            options=options,
        )

    @classmethod
    def load(cls, path: Path) -> "ProjectConfig":
        if not path.exists():
            logger.info("Config file not found at %s, using defaults", path)
            return cls()

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Error loading config %s: %s; using defaults", path, exc)
            return cls()

        if not isinstance(raw, dict):
            logger.warning("Config %s is not a JSON object; using defaults", path)
            return cls()
        return cls.from_dict(raw)

    @classmethod
    def sample(cls) -> "ProjectConfig":
        return cls(
            base_url=DEFAULT_BASE_URL,
            targets=[
                Target(name="homepage", url="/").to_dict(),
                Target(name="header", url="/", selector="header", viewport=Viewport(1200, 200)).to_dict(),
                Target(name="mobile-homepage", url="/", viewport=Viewport(375, 667)).to_dict(),
            ],
        )

    def with_targets(self, base_url: str, targets: Iterable[Target]) -> "ProjectConfig":
        return replace(
            self,
            base_url=base_url,
            targets=[target.to_dict() for target in targets],
            options=copy.deepcopy(self.options),
        )

    def validate(self) -> None:
        errors: List[str] = []

        if not self.base_url:
            errors.append("baseUrl is required")

        if not isinstance(self.targets, list) or not self.targets:
            errors.append("targets must be a non-empty array")
        else:
            for index, target in enumerate(self.targets):
                if not isinstance(target, dict):
                    errors.append(f"Target {index}: must be an object")
                    continue
                if not target.get("name"):
                    errors.append(f"Target {index}: name is required")
                if not target.get("url"):
                    errors.append(f"Target {index}: url is required")
                viewport = target.get("viewport")
                if not viewport:
                    errors.append(f"Target {index}: viewport is required")
                elif not isinstance(viewport, dict) or not viewport.get("width") or not viewport.get("height"):
                    errors.append(f"Target {index}: viewport must have width and height")

        if errors:
            raise ProjectConfigError(errors)
