"""Shared schema validation utilities for AstroLab story content."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from astrolab.story_schema import (
    RECORD_SPECS,
    START_KEY,
    NodeKey,
    choice_target,
    format_key,
    format_validation_message,
    is_ending_outcome,
    is_non_empty_str,
    normalize_nodes,
    path,
    path_key_for_outcome,
)


class ValidationContext:
    """Utility container for accumulating validation errors."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def add(self, context: str, path_str: str, message: str) -> None:
        self.errors.append(format_validation_message(path_str, context, message))

    def extend_with_path(self, messages: Iterable[str], path_str: str) -> None:
        for message in messages:
            self.errors.append(f"{path_str}: {message}")


def require(condition: bool, context: str, path_str: str, message: str, ctx: ValidationContext) -> None:
    if not condition:
        ctx.add(context, path_str, message)


def build_transition_graph(
    nodes: Mapping[NodeKey, Mapping[str, Any]],
) -> Tuple[Dict[NodeKey, List[NodeKey]], List[Tuple[NodeKey, int, NodeKey]]]:
    """Return the (act, scene) adjacency list and every dangling transition.

    Ending choices never load a node, so their targets are not followed.
    """
    graph: Dict[NodeKey, List[NodeKey]] = {key: [] for key in nodes}
    dangling: List[Tuple[NodeKey, int, NodeKey]] = []
    for key, node in nodes.items():
        choices = node.get("choices")
        if not isinstance(choices, list):
            continue
        for index, choice in enumerate(choices):
            if not isinstance(choice, Mapping) or is_ending_outcome(choice.get("outcome")):
                continue
            target = choice_target(choice)
            if target in nodes:
                graph[key].append(target)
            else:
                dangling.append((key, index, target))
    return graph, dangling


def reachable_from(start: NodeKey, graph: Mapping[NodeKey, Sequence[NodeKey]]) -> Set[NodeKey]:
    if start not in graph:
        return set()
    visited: Set[NodeKey] = set()
    stack = [start]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        stack.extend(graph.get(current, []))
    return visited


def validate_data_point(data_point: Any, context: str, path_parts: Sequence[object], ctx: ValidationContext) -> None:
    if data_point is None:
        return
    if not isinstance(data_point, Mapping):
        ctx.add(context, path(*path_parts), "'dataPoint' must be an object if present.")
        return
    ctx.extend_with_path(RECORD_SPECS["dataPoint"].validate(data_point, context), path(*path_parts))


def validate_choice(
    choice: Any,
    key: NodeKey,
    index: int,
    path_parts: Sequence[object],
    ctx: ValidationContext,
) -> None:
    context = f"Choice {index} in {format_key(key)}"
    if not isinstance(choice, Mapping):
        ctx.add(context, path(*path_parts), "must be an object.")
        return
    ctx.extend_with_path(RECORD_SPECS["choice"].validate(choice, context), path(*path_parts))


def validate_story(story: Mapping[str, Any]) -> List[str]:
    ctx = ValidationContext()

    require(
        is_non_empty_str(story.get("title")),
        "Story data",
        path("title"),
        "must include a non-empty 'title'.",
        ctx,
    )
    require(
        "acts" in story,
        "Story data",
        path("acts"),
        "must include an 'acts' section.",
        ctx,
    )

    characters = story.get("characters", {})
    if not isinstance(characters, Mapping):
        ctx.add("Story data", path("characters"), "'characters' must be an object if present.")
    paths = story.get("paths", {})
    if not isinstance(paths, Mapping):
        ctx.add("Story data", path("paths"), "'paths' must be an object if present.")

    raw_nodes = story.get("acts")
    nodes, _node_errors = normalize_nodes(raw_nodes, ctx)

    if isinstance(raw_nodes, list):
        for idx, node in enumerate(raw_nodes):
            if not isinstance(node, Mapping):
                continue
            key = (node.get("act"), node.get("scene"))
            context = f"Node {format_key(key)}"
            ctx.extend_with_path(RECORD_SPECS["node"].validate(node, context), path("acts", idx))
            validate_data_point(node.get("dataPoint"), context, ("acts", idx, "dataPoint"), ctx)
            choices = node.get("choices")
            if not isinstance(choices, list):
                continue
            for choice_index, choice in enumerate(choices):
                validate_choice(
                    choice,
                    key,
                    choice_index + 1,
                    ("acts", idx, "choices", choice_index),
                    ctx,
                )

    if not nodes:
        return ctx.errors

    if START_KEY not in nodes:
        ctx.add("Story data", path("acts"), f"no node defined for the start ({format_key(START_KEY)}).")

    graph, dangling = build_transition_graph(nodes)
    for origin, index, target in dangling:
        ctx.add(
            f"Choice {index + 1} in {format_key(origin)}",
            path("acts", f"{origin[0]}.{origin[1]}", "choices", index),
            f"transitions to unknown node ({format_key(target)}).",
        )

    if START_KEY in nodes:
        reached = reachable_from(START_KEY, graph)
        for key in sorted(set(nodes) - reached):
            ctx.add("Nodes", path("acts", f"{key[0]}.{key[1]}"), f"{format_key(key)} is unreachable from the start.")

    if isinstance(paths, Mapping) and paths:
        for key, node in nodes.items():
            for choice in node.get("choices") or []:
                outcome = choice.get("outcome") if isinstance(choice, Mapping) else None
                if is_ending_outcome(outcome) and path_key_for_outcome(outcome) not in paths:
                    ctx.add(
                        f"Ending in {format_key(key)}",
                        path("paths"),
                        f"no path entry for '{path_key_for_outcome(outcome)}'.",
                    )

    return ctx.errors
