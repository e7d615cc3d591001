"""
Graph coloring heuristics for locality adjacency graphs.

Colors are non-negative integers. Both heuristics always terminate and color
every region, since a fresh integer is always available.

- greedy_coloring: fixed input order, smallest free color. Used by the batch
  preparation step.
- dsatur_coloring: saturation-degree ordering (DSATUR). Used at runtime; it
  usually needs fewer colors on irregular graphs.
"""

from typing import Dict, Iterable, List, Set

Coloring = Dict[str, int]


def smallest_free_color(used: Set[int]) -> int:
    color = 0
    while color in used:
        color += 1
    return color


def color_count(coloring: Coloring) -> int:
    return len(set(coloring.values()))


def greedy_coloring(order: Iterable[str], graph: Dict[str, Set[str]]) -> Coloring:
    """
    Naive greedy coloring in the given order.

    Each region takes the smallest color not used by an already-colored
    neighbor. Neighbors that are not part of `order` are ignored.

    Args:
        order: Region ids in processing order
        graph: Dictionary mapping region id to set of neighbor ids

    Returns:
        Dictionary mapping each id in `order` to its color
    """
    colors = {}
    for node in order:
        used = {colors[neighbor] for neighbor in graph.get(node, ()) if neighbor in colors}
        colors[node] = smallest_free_color(used)
    return colors


def _neighbor_colors(node: str, graph: Dict[str, Set[str]], colors: Coloring) -> Set[int]:
    return {colors[neighbor] for neighbor in graph.get(node, ()) if neighbor in colors}


def _choose_next_node(uncolored: List[str], saturation: Dict[str, int], degree: Dict[str, int]) -> str:
    # Highest saturation, then highest degree, then smallest id.
    return min(uncolored, key=lambda n: (-saturation[n], -degree[n], n))


def dsatur_coloring(graph: Dict[str, Set[str]]) -> Coloring:
    """
    Saturation-degree (DSATUR) greedy coloring.

    Repeatedly colors the uncolored region with the most distinctly-colored
    neighbors, breaking ties by neighbor count and then by region id, so the
    result is reproducible for a given graph.

    Args:
        graph: Dictionary mapping region id to set of neighbor ids

    Returns:
        Dictionary mapping every region id in `graph` to its color
    """
    colors = {}
    degree = {node: len(neighbors) for node, neighbors in graph.items()}
    saturation = {node: 0 for node in graph}
    uncolored = set(graph)

    while uncolored:
        node = _choose_next_node(list(uncolored), saturation, degree)
        colors[node] = smallest_free_color(_neighbor_colors(node, graph, colors))
        uncolored.discard(node)

        for neighbor in graph[node]:
            if neighbor in uncolored:
                saturation[neighbor] = len(_neighbor_colors(neighbor, graph, colors))

    return colors
