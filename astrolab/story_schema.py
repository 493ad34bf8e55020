"""Machine-readable schema specs for AstroLab story content."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
import json
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple

NodeKey = Tuple[int, int]
FieldValidator = Callable[[Mapping[str, Any], str], List[str]]

CHARACTERS = ("narrator", "watcher", "seeker", "defender")
DATA_POINT_TYPES = ("asteroid", "earthquake", "tsunami", "crater")
ENDING_PREFIX = "end_"
PATH_SUFFIX = "_path"
START_KEY: NodeKey = (1, 1)


def path(*parts: object) -> str:
    path_str = ""
    for part in parts:
        if isinstance(part, int):
            path_str = f"{path_str}[{part}]"
            continue
        if not isinstance(part, str):
            part = str(part)
        if part.isidentifier():
            path_str = f"{path_str}.{part}" if path_str else part
        else:
            path_str = f'{path_str}[{json.dumps(part)}]'
    return path_str


def format_validation_message(path_str: str, context: str, message: str) -> str:
    if context:
        return f"{path_str}: {context}: {message}"
    return f"{path_str}: {message}"


def is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_positive_int(value: Any) -> bool:
    # bool is an int subclass; JSON true must not pass as act 1
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def is_ending_outcome(outcome: Any) -> bool:
    return isinstance(outcome, str) and outcome.startswith(ENDING_PREFIX)


def path_key_for_outcome(outcome: str) -> str:
    """Map an ending outcome token to its path id (``end_phoenix`` -> ``phoenix_path``)."""
    return outcome[len(ENDING_PREFIX):] + PATH_SUFFIX


def choice_target(choice: Mapping[str, Any]) -> NodeKey:
    next_scene = choice.get("nextScene")
    return choice.get("nextAct"), next_scene if next_scene is not None else 1


def format_key(key: NodeKey) -> str:
    act, scene = key
    return f"act {act} scene {scene}"


def normalize_nodes(
    raw_nodes: Any, ctx: Any | None = None
) -> Tuple[Dict[NodeKey, Dict[str, Any]], List[str]]:
    """Index raw node records by ``(act, scene)``.

    The first record wins when a key repeats; the repeat is still reported as
    an error so authors can fix the table.
    """
    nodes: Dict[NodeKey, Dict[str, Any]] = {}
    errors: List[str] = []
    keys: List[NodeKey] = []

    def add_error(context: str, path_parts: Sequence[object], message: str) -> None:
        path_str = path(*path_parts)
        errors.append(format_validation_message(path_str, context, message))
        if ctx is not None:
            ctx.add(context, path_str, message)

    if not isinstance(raw_nodes, list):
        add_error("Story data", ("acts",), "must be a list of story node entries.")
        return nodes, errors

    for idx, entry in enumerate(raw_nodes):
        context = f"Node entry {idx + 1}"
        if not isinstance(entry, Mapping):
            add_error(context, ("acts", idx), "must be an object.")
            continue
        act = entry.get("act")
        scene = entry.get("scene")
        if not is_positive_int(act):
            add_error(context, ("acts", idx, "act"), "requires a positive integer 'act'.")
            continue
        if not is_positive_int(scene):
            add_error(context, ("acts", idx, "scene"), "requires a positive integer 'scene'.")
            continue
        key = (act, scene)
        keys.append(key)
        nodes.setdefault(key, dict(entry))

    duplicates = [key for key, count in Counter(keys).items() if count > 1]
    if duplicates:
        dup_list = ", ".join(format_key(key) for key in sorted(duplicates))
        add_error("Nodes", ("acts",), f"duplicate node keys found: {dup_list}.")

    return nodes, errors


@dataclass(frozen=True)
class RecordSpec:
    required_fields: Tuple[str, ...]
    optional_fields: Tuple[str, ...]
    field_rules: Mapping[str, str]
    validate: FieldValidator


def _validate_node_fields(node: Mapping[str, Any], context: str) -> List[str]:
    errors: List[str] = []
    character = node.get("character")
    if character not in CHARACTERS:
        errors.append(
            f"{context}: 'character' must be one of {', '.join(CHARACTERS)} (got {character!r})."
        )
    dialogue = node.get("dialogue")
    if not isinstance(dialogue, list) or not all(isinstance(line, str) for line in dialogue):
        errors.append(f"{context}: 'dialogue' must be a list of strings.")
    choices = node.get("choices")
    if not isinstance(choices, list):
        errors.append(f"{context}: 'choices' must be a list of choice objects.")
    return errors


def _validate_choice_fields(choice: Mapping[str, Any], context: str) -> List[str]:
    errors: List[str] = []
    if not is_non_empty_str(choice.get("text")):
        errors.append(f"{context}: requires non-empty 'text'.")
    outcome = choice.get("outcome")
    if not is_non_empty_str(outcome):
        errors.append(f"{context}: requires a non-empty 'outcome' token.")
    elif is_ending_outcome(outcome) and outcome == ENDING_PREFIX:
        errors.append(f"{context}: ending outcome '{outcome}' must name a path after the prefix.")
    if not is_positive_int(choice.get("nextAct")):
        errors.append(f"{context}: requires a positive integer 'nextAct'.")
    next_scene = choice.get("nextScene")
    if next_scene is not None and not is_positive_int(next_scene):
        errors.append(f"{context}: optional 'nextScene' must be a positive integer if provided.")
    return errors


def _validate_data_point_fields(data_point: Mapping[str, Any], context: str) -> List[str]:
    errors: List[str] = []
    point_type = data_point.get("type")
    if point_type not in DATA_POINT_TYPES:
        errors.append(
            f"{context}: data point 'type' must be one of {', '.join(DATA_POINT_TYPES)}"
            f" (got {point_type!r})."
        )
    if not is_non_empty_str(data_point.get("value")):
        errors.append(f"{context}: data point requires a non-empty display 'value'.")
    return errors


RECORD_SPECS: Dict[str, RecordSpec] = {
    "node": RecordSpec(
        required_fields=("act", "scene", "character", "dialogue", "choices"),
        optional_fields=("dataPoint",),
        field_rules={
            "act": "positive integer chapter",
            "scene": "positive integer, unique within the act",
            "character": "one of " + "/".join(CHARACTERS),
            "dialogue": "list of text lines",
            "choices": "list of choice objects",
            "dataPoint": "optional data point object",
        },
        validate=_validate_node_fields,
    ),
    "choice": RecordSpec(
        required_fields=("text", "outcome", "nextAct"),
        optional_fields=("nextScene",),
        field_rules={
            "text": "non-empty label",
            "outcome": f"non-empty token; '{ENDING_PREFIX}' prefix ends the playthrough",
            "nextAct": "positive integer",
            "nextScene": "positive integer (defaults to 1)",
        },
        validate=_validate_choice_fields,
    ),
    "dataPoint": RecordSpec(
        required_fields=("type", "value"),
        optional_fields=(),
        field_rules={
            "type": "one of " + "/".join(DATA_POINT_TYPES),
            "value": "non-empty display string",
        },
        validate=_validate_data_point_fields,
    ),
}
