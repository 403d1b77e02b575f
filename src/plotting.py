"""Graphviz rendering of family windows and relationship diagrams."""

from pathlib import Path

import networkx as nx
import pydot

from graph import GraphIndex, build_graph, build_union_layout_graph
from parsing import parse_date
from relationship import Diagram
from window import WindowNode, format_name_for_node

FILL_COLORS = {"M": "lightblue", "F": "lightpink"}


def _fill(sex: str | None) -> str:
    return FILL_COLORS.get(sex or "", "lightgray")


def _years(birth_date: str | None, death_date: str | None) -> str:
    born = parse_date(birth_date)
    died = parse_date(death_date)
    if born is None and died is None:
        return ""
    return f"{born.year if born else ''}-{died.year if died else ''}"


def window_graph(nodes: list[WindowNode]) -> nx.DiGraph:
    """NetworkX graph of a window; its links are already pruned to the window."""
    return build_graph([n.person for n in nodes], {n.id: n.gender for n in nodes})


def window_to_dot(nodes: list[WindowNode]) -> pydot.Dot:
    """
    Lay a family window out with the union-node model.

    - Parents appear above children
    - Spouses are aligned horizontally on the same rank
    - Family/union nodes connect spouse pairs to their children
    """
    by_id = {n.id: n for n in nodes}
    H = build_union_layout_graph(window_graph(nodes))

    P = pydot.Dot(graph_type="digraph")
    P.set("rankdir", "TB")
    P.set("splines", "ortho")
    P.set("nodesep", "0.4")
    P.set("ranksep", "0.6")

    spouse_pairs: list[tuple] = []

    for node, data in H.nodes(data=True):
        if data.get("node_type") == "family":
            P.add_node(pydot.Node(str(node), shape="point", width="0.1", height="0.1", label=""))
            spouses = data.get("spouses", ())
            if len(spouses) == 2:
                spouse_pairs.append(spouses)
            continue

        member = by_id[node]
        lines = [member.relation, member.initials, member.label]
        years = _years(member.person.birth_date, member.person.death_date)
        lines.append(years)
        label = "\n".join(line for line in lines if line)

        P.add_node(
            pydot.Node(
                str(node),
                label=label,
                shape="box",
                style="rounded,filled",
                fillcolor=_fill(data.get("sex")),
                fontsize="10",
            )
        )

    for u, v, data in H.edges(data=True):
        if data.get("edge_type") == "spouse_to_family":
            P.add_edge(pydot.Edge(str(u), str(v), dir="none", color="darkgray"))
        elif data.get("edge_type") == "family_to_child":
            P.add_edge(pydot.Edge(str(u), str(v), color="darkgray"))

    for i, (a, b) in enumerate(spouse_pairs):
        sg = pydot.Subgraph(f"couple_{i}", rank="same")
        sg.add_node(pydot.Node(str(a)))
        sg.add_node(pydot.Node(str(b)))
        P.add_subgraph(sg)

    return P


def _diagram_node(index: GraphIndex, diagram: Diagram, person_id: str) -> pydot.Node:
    person = index.get_person(person_id)
    if person is None:
        raise ValueError(f"Person {person_id} is not in the index")
    role = "ME" if person_id == diagram.source_id else diagram.labels.get(person_id, "")
    label = "\n".join(x for x in (role, format_name_for_node(person.name), person.id) if x)
    return pydot.Node(
        str(person_id),
        label=label,
        shape="box",
        style="rounded,filled",
        fillcolor=_fill(index.gender_of(person_id).value),
        fontsize="10",
    )


def diagram_to_dot(index: GraphIndex, diagram: Diagram) -> pydot.Dot:
    """
    Draw a relationship path with the pivot on top and the two branches
    hanging below it; a sibling pair pivot is drawn side by side.
    """
    P = pydot.Dot(graph_type="digraph")
    P.set("rankdir", "TB")
    P.set("nodesep", "0.5")
    P.set("label", f"{diagram.term} ({diagram.code})")
    P.set("labelloc", "b")

    for person_id in diagram.path:
        P.add_node(_diagram_node(index, diagram, person_id))

    if diagram.sibling_bridge:
        left_top, right_top = diagram.pivot
        sg = pydot.Subgraph("pivot", rank="same")
        sg.add_node(pydot.Node(str(left_top)))
        sg.add_node(pydot.Node(str(right_top)))
        P.add_subgraph(sg)
        P.add_edge(pydot.Edge(str(left_top), str(right_top), dir="none", style="dashed"))
    else:
        left_top = right_top = diagram.pivot[0]

    for top, branch in ((left_top, diagram.left), (right_top, diagram.right)):
        above = top
        for person_id in branch:
            P.add_edge(pydot.Edge(str(above), str(person_id), color="darkgray"))
            above = person_id

    return P


def write_graph(P: pydot.Dot, output_path: Path | None = None):
    """Write a rendered graph to disk (format from extension), or display it."""
    if output_path:
        ext = output_path.suffix.lower().lstrip(".")
        if ext == "dot":
            output_path.write_text(P.to_string(), encoding="utf-8")
        else:
            if ext not in ("png", "svg", "pdf"):
                ext = "png"
            P.write(str(output_path), format=ext)
        print(f"Graph saved to {output_path}")
    else:
        # Save to temporary file and display
        import tempfile

        import matplotlib.image as mpimg
        import matplotlib.pyplot as plt

        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            P.write(f.name, format="png")
            img = mpimg.imread(f.name)
            plt.figure(figsize=(20, 16))
            plt.imshow(img)
            plt.axis("off")
            plt.tight_layout()
            plt.show()
