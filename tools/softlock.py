"""Soft-lock analysis helpers for AstroLab story validation."""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Any, Dict, List, Mapping, Set

from astrolab.schema import build_transition_graph
from astrolab.story_schema import NodeKey, format_key, is_ending_outcome, normalize_nodes, path


def _ending_nodes(nodes: Mapping[NodeKey, Mapping[str, Any]]) -> Set[NodeKey]:
    endings: Set[NodeKey] = set()
    for key, node in nodes.items():
        for choice in node.get("choices") or []:
            if isinstance(choice, Mapping) and is_ending_outcome(choice.get("outcome")):
                endings.add(key)
                break
    return endings


def analyze_softlocks(story: Mapping[str, Any]) -> List[str]:
    """Warn about nodes a player can enter but never finish from.

    A node with no choices stalls the playthrough outright; a node whose every
    route avoids an ending choice loops forever.
    """
    nodes, _ = normalize_nodes(story.get("acts"))
    graph, _ = build_transition_graph(nodes)

    warnings: List[str] = []
    for key in sorted(nodes):
        choices = nodes[key].get("choices")
        if isinstance(choices, list) and not choices:
            warnings.append(
                f"{path('acts', f'{key[0]}.{key[1]}')}: {format_key(key)} has no choices."
            )

    reverse: Dict[NodeKey, List[NodeKey]] = defaultdict(list)
    for origin, targets in graph.items():
        for target in targets:
            reverse[target].append(origin)

    can_finish: Set[NodeKey] = set()
    queue: deque[NodeKey] = deque(_ending_nodes(nodes))
    while queue:
        key = queue.popleft()
        if key in can_finish:
            continue
        can_finish.add(key)
        queue.extend(reverse.get(key, []))

    for key in sorted(set(nodes) - can_finish):
        choices = nodes[key].get("choices")
        if isinstance(choices, list) and not choices:
            continue
        warnings.append(
            f"{path('acts', f'{key[0]}.{key[1]}')}: no route from {format_key(key)} reaches an ending."
        )

    return warnings
