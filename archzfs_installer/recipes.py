from __future__ import annotations

import logging
import shlex
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Set, Tuple

from .errors import RecipeError
from .pipeline import Stage, Step

logger = logging.getLogger(__name__)

_FORMATTER = string.Formatter()


@dataclass(frozen=True)
class StepTemplate:
    label: str
    command: str
    sensitive: bool = False

    def placeholders(self) -> Set[str]:
        names: Set[str] = set()
        try:
            parsed = list(_FORMATTER.parse(self.command))
        except ValueError as e:
            raise RecipeError(f"Malformed command template for '{self.label}': {e}") from e
        for _literal, name, _spec, _conv in parsed:
            if name is None:
                continue
            if not name.isidentifier():
                raise RecipeError(f"Placeholder {{{name}}} in '{self.label}' must be a plain name")
            names.add(name)
        return names

    def render(self, params: Mapping[str, str]) -> Step:
        missing = sorted(self.placeholders() - set(params))
        if missing:
            raise RecipeError(f"No value for {', '.join(missing)} in step '{self.label}'")
        quoted = {k: shlex.quote(str(v)) for k, v in params.items()}
        return Step(
            label=self.label,
            command=self.command.format_map(quoted),
            sensitive=self.sensitive,
        )


@dataclass(frozen=True)
class RecipeBook:
    """Stage name -> ordered step templates.

    Parameter values are shell-quoted when substituted, so templates place
    placeholders outside of quoted strings.
    """

    stages: Mapping[str, Tuple[StepTemplate, ...]]

    def names(self) -> List[str]:
        return list(self.stages)

    def build(self, name: str, params: Mapping[str, str]) -> Stage:
        templates = self.stages.get(name)
        if templates is None:
            raise RecipeError(f"No recipe for stage {name}")
        steps = tuple(t.render(params) for t in templates)
        logger.debug("Built stage %s with %d steps", name, len(steps))
        return Stage(name=name, steps=steps)


def _parse_step(stage: str, index: int, item: Any) -> StepTemplate:
    if not isinstance(item, dict):
        raise RecipeError(f"{stage}[{index}] must be a mapping with label/command")
    command = item.get("command")
    if not isinstance(command, str) or not command.strip():
        raise RecipeError(f"{stage}[{index}] has no command")
    label = str(item.get("label") or command.split()[0])
    return StepTemplate(label=label, command=command.strip(), sensitive=bool(item.get("sensitive", False)))


def parse_recipes(raw: Any) -> RecipeBook:
    if not isinstance(raw, dict) or not isinstance(raw.get("stages"), dict):
        raise RecipeError("Recipe document must contain a 'stages' mapping")

    stages: Dict[str, Tuple[StepTemplate, ...]] = {}
    for name, items in raw["stages"].items():
        if not isinstance(items, list):
            raise RecipeError(f"Stage {name} must be a list of steps")
        stages[str(name)] = tuple(_parse_step(str(name), i, item) for i, item in enumerate(items))
    return RecipeBook(stages=stages)


def load_recipes(path: str) -> RecipeBook:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to load recipes") from e

    p = Path(path)
    if not p.exists():
        raise RecipeError(f"Recipe file not found: {path}")
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise RecipeError(f"Invalid YAML in {path}: {e}") from e

    book = parse_recipes(raw)
    logger.info("Loaded %d stage recipes from %s", len(book.stages), path)
    return book
