import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_STORY_PATH = REPO_ROOT / "story" / "story.json"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from astrolab.schema import build_transition_graph, reachable_from
from astrolab.story_schema import START_KEY, format_key, normalize_nodes


def load_story(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def build_graph(story: dict):
    """Return the transition graph plus one message per dangling transition."""
    nodes, _ = normalize_nodes(story.get("acts"))
    graph, dangling = build_transition_graph(nodes)
    missing = [
        f"{format_key(origin)} choice {index + 1} -> {format_key(target)}"
        for origin, index, target in dangling
    ]
    return graph, missing


def main() -> None:
    story_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_STORY_PATH
    story = load_story(story_path)
    graph, missing = build_graph(story)
    reached = reachable_from(START_KEY, graph)
    unreachable = sorted(set(graph.keys()) - reached)

    print(f"Story file: {story_path}")
    print(f"Total nodes: {len(graph)}")
    print(f"Reachable nodes: {len(reached)}")
    if missing:
        print("Transitions to missing nodes:")
        for message in missing:
            print(f"  - {message}")
    if unreachable:
        print("Unreachable nodes:")
        for key in unreachable:
            print(f"  - {format_key(key)}")
    else:
        print(f"All nodes reachable from {format_key(START_KEY)}.")


if __name__ == "__main__":
    main()
