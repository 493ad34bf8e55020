"""Story content model and loader."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from astrolab.logger import get_logger
from astrolab.schema import validate_story
from astrolab.story_schema import START_KEY, NodeKey, is_ending_outcome

logger = get_logger(__name__)

DEFAULT_STORY_PATH = Path(__file__).resolve().parent.parent / "story" / "story.json"
DEFAULT_PATH_COUNT = 3


@dataclass(frozen=True)
class DataPoint:
    type: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "value": self.value}


@dataclass(frozen=True)
class Choice:
    text: str
    outcome: str
    next_act: int
    next_scene: Optional[int] = None

    @property
    def target(self) -> NodeKey:
        return self.next_act, self.next_scene or 1

    @property
    def is_ending(self) -> bool:
        return is_ending_outcome(self.outcome)


@dataclass(frozen=True)
class StoryNode:
    act: int
    scene: int
    character: str
    dialogue: Tuple[str, ...]
    choices: Tuple[Choice, ...]
    data_point: Optional[DataPoint] = None

    @property
    def key(self) -> NodeKey:
        return self.act, self.scene


@dataclass(frozen=True)
class CharacterInfo:
    name: str
    title: str = ""
    color: str = ""


@dataclass(frozen=True)
class PathInfo:
    id: str
    name: str
    description: str = ""
    badge: str = ""


@dataclass
class StoryContent:
    """Read-only content table addressed by ``(act, scene)``."""

    title: str
    nodes: List[StoryNode]
    characters: Dict[str, CharacterInfo] = field(default_factory=dict)
    paths: Dict[str, PathInfo] = field(default_factory=dict)

    def find(self, act: int, scene: int) -> Optional[StoryNode]:
        for node in self.nodes:
            if node.act == act and node.scene == scene:
                return node
        return None

    def __iter__(self) -> Iterator[StoryNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def start(self) -> Optional[StoryNode]:
        return self.find(*START_KEY)

    @property
    def path_count(self) -> int:
        return len(self.paths) or DEFAULT_PATH_COUNT

    def character(self, character_id: str) -> CharacterInfo:
        info = self.characters.get(character_id)
        if info is None:
            return CharacterInfo(name=character_id.upper())
        return info


def _raise_story_validation(errors):
    raise ValueError("Invalid story.json:\n- " + "\n- ".join(errors))


def _build_choice(raw: Mapping[str, Any]) -> Choice:
    return Choice(
        text=raw["text"],
        outcome=raw["outcome"],
        next_act=raw["nextAct"],
        next_scene=raw.get("nextScene"),
    )


def _build_node(raw: Mapping[str, Any]) -> StoryNode:
    data_point = raw.get("dataPoint")
    return StoryNode(
        act=raw["act"],
        scene=raw["scene"],
        character=raw["character"],
        dialogue=tuple(raw.get("dialogue", [])),
        choices=tuple(_build_choice(choice) for choice in raw.get("choices", [])),
        data_point=DataPoint(data_point["type"], data_point["value"]) if data_point else None,
    )


def build_story(data: Mapping[str, Any]) -> StoryContent:
    """Validate raw story data and freeze it into a :class:`StoryContent`."""
    if not isinstance(data, Mapping):
        _raise_story_validation(["Story data must be a JSON object."])

    errors = validate_story(data)
    if errors:
        _raise_story_validation(errors)

    characters = {
        character_id: CharacterInfo(
            name=info.get("name", character_id.upper()),
            title=info.get("title", ""),
            color=info.get("color", ""),
        )
        for character_id, info in (data.get("characters") or {}).items()
        if isinstance(info, Mapping)
    }
    paths = {
        path_id: PathInfo(
            id=path_id,
            name=info.get("name", path_id),
            description=info.get("description", ""),
            badge=info.get("badge", ""),
        )
        for path_id, info in (data.get("paths") or {}).items()
        if isinstance(info, Mapping)
    }
    nodes = [_build_node(raw) for raw in data["acts"]]
    logger.debug("Built story '%s' with %d nodes", data["title"], len(nodes))
    return StoryContent(title=data["title"], nodes=nodes, characters=characters, paths=paths)


def load_story(path: Path | str = DEFAULT_STORY_PATH) -> StoryContent:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    story = build_story(data)
    logger.info("Loaded story '%s' (%d nodes) from %s", story.title, len(story), path)
    return story
