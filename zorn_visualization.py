"""
zorn_visualization.py

Plotly-based visualization for relations, chains and closure families.

This module converts relations into Hasse diagrams (NetworkX DiGraphs of
covering pairs) and renders them as interactive Plotly figures, optionally
highlighting a chain. Closure families are drawn as derivation graphs.
"""

import networkx as nx
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from zorn_core import ChainOrigin


ORIGIN_COLORS = {
    ChainOrigin.EMPTY: '#636efa',
    ChainOrigin.START: '#00cc96',
    ChainOrigin.SUCCESSOR: '#ab63fa',
    ChainOrigin.UNION: '#ffa15a',
}

CHAIN_COLOR = '#d62728'
NODE_COLOR = 'lightblue'


def hasse_graph(relation):
    """
    Build the Hasse diagram of a relation.

    Args:
        relation: Relation

    Returns:
        NetworkX DiGraph with an edge lower -> upper per covering pair
    """
    G = nx.DiGraph()
    G.add_nodes_from(relation.carrier)
    G.add_edges_from(relation.hasse_edges())
    return G


def create_relation_figure(relation,
                           chain=None,
                           layout='hierarchical',
                           node_size=14,
                           title=None):
    """
    Create an interactive Plotly Hasse diagram of a relation.

    Args:
        relation: Relation
        chain: Optional chain to highlight (members and the edges between
            consecutive members are drawn in red)
        layout: Layout algorithm - 'hierarchical', 'force', or 'circular'
        node_size: Base size for nodes (chain members are drawn larger)
        title: Optional title for the graph

    Returns:
        plotly.graph_objects.Figure
    """
    G = hasse_graph(relation)
    chain = frozenset(chain) if chain is not None else frozenset()

    pos = compute_layout(G, layout)

    traces = [create_edge_trace(G, pos)]
    if chain:
        traces.append(create_chain_edge_trace(relation, chain, pos))
    traces.append(create_node_trace(relation, G, pos, chain, node_size))

    fig = go.Figure(data=traces)

    default_title = f"Relation ({len(relation.carrier)} elements)"
    if chain:
        default_title += f", chain of length {len(chain)}"

    fig.update_layout(
        title=dict(text=title or default_title, font=dict(size=16)),
        showlegend=False,
        hovermode='closest',
        margin=dict(b=20, l=5, r=5, t=40),
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        plot_bgcolor='white',
        width=800,
        height=600
    )

    return fig


def compute_layout(G, layout_type):
    """
    Compute node positions based on layout algorithm.

    Args:
        G: NetworkX DiGraph
        layout_type: 'hierarchical', 'force', or 'circular'

    Returns:
        dict mapping node -> (x, y) position
    """
    if layout_type == 'hierarchical':
        return hierarchical_layout(G)
    elif layout_type == 'force':
        return nx.spring_layout(G, k=0.5, iterations=50, seed=0)
    elif layout_type == 'circular':
        return nx.circular_layout(G)
    else:
        raise ValueError(f"Unknown layout type: {layout_type}")


def hierarchical_layout(G):
    """
    Layer a DAG by longest path from its sources.

    Each node appears above all its predecessors; nodes on the same level
    are spread evenly in [0, 1].

    Args:
        G: NetworkX DiGraph

    Returns:
        dict mapping node -> (x, y) position
    """
    if G.number_of_nodes() == 0:
        return {}

    try:
        topo_order = list(nx.topological_sort(G))
    except nx.NetworkXUnfeasible:
        # Not a DAG, fall back to spring layout
        return nx.spring_layout(G, k=0.5, iterations=50, seed=0)

    levels = {}
    for node in topo_order:
        pred_levels = [levels[pred] for pred in G.predecessors(node)]
        levels[node] = max(pred_levels) + 1 if pred_levels else 0

    level_groups = {}
    for node, level in levels.items():
        level_groups.setdefault(level, []).append(node)

    pos = {}
    max_level = max(levels.values())

    for level, nodes in level_groups.items():
        y = level / max(max_level, 1)
        n_nodes = len(nodes)
        for i, node in enumerate(sorted(nodes, key=str)):
            x = i / (n_nodes - 1) if n_nodes > 1 else 0.5
            pos[node] = (x, y)

    return pos


def create_edge_trace(G, pos, color='#888', width=0.5):
    """
    Create Plotly trace for edges.

    Args:
        G: NetworkX DiGraph
        pos: dict mapping node -> (x, y) position

    Returns:
        plotly.graph_objects.Scatter trace
    """
    edge_x = []
    edge_y = []

    for edge in G.edges():
        x0, y0 = pos[edge[0]]
        x1, y1 = pos[edge[1]]
        edge_x.extend([x0, x1, None])
        edge_y.extend([y0, y1, None])

    return go.Scatter(
        x=edge_x,
        y=edge_y,
        line=dict(width=width, color=color),
        hoverinfo='none',
        mode='lines'
    )


def create_chain_edge_trace(relation, chain, pos):
    """Red line through the members of a chain, from bottom to top."""
    # In a chain, an element's rank is the number of members below it
    ordered = sorted(chain, key=lambda x: sum(1 for c in chain if relation.leq(c, x)))

    line_x = []
    line_y = []
    for lower, upper in zip(ordered, ordered[1:]):
        x0, y0 = pos[lower]
        x1, y1 = pos[upper]
        line_x.extend([x0, x1, None])
        line_y.extend([y0, y1, None])

    return go.Scatter(
        x=line_x,
        y=line_y,
        line=dict(width=2, color=CHAIN_COLOR),
        hoverinfo='none',
        mode='lines',
        name='Chain'
    )


def create_node_trace(relation, G, pos, chain, base_size):
    """
    Create Plotly trace for elements with hover information.

    Args:
        relation: Relation
        G: Hasse diagram of relation
        pos: dict mapping node -> (x, y) position
        chain: frozenset of highlighted elements
        base_size: Base node size

    Returns:
        plotly.graph_objects.Scatter trace
    """
    node_x = []
    node_y = []
    labels = []
    hover = []
    colors = []
    sizes = []

    for node in G.nodes():
        x, y = pos[node]
        node_x.append(x)
        node_y.append(y)
        labels.append(str(node))

        in_chain = node in chain
        hover.append(create_hover_text(node, relation, G, in_chain))
        colors.append(CHAIN_COLOR if in_chain else NODE_COLOR)
        sizes.append(base_size + 6 if in_chain else base_size)

    return go.Scatter(
        x=node_x,
        y=node_y,
        mode='markers+text',
        text=labels,
        textposition='middle right',
        hoverinfo='text',
        hovertext=hover,
        marker=dict(
            size=sizes,
            color=colors,
            line=dict(width=1, color='white')
        )
    )


def create_hover_text(node, relation, G, in_chain=False):
    """HTML hover text for one element."""
    lines = [
        f"<b>{node}</b>",
        f"Below: {len(relation.down_set(node) - {node})}",
        f"Above: {len(relation.up_set(node) - {node})}",
        f"Covers: {G.in_degree(node)}",
        f"Covered by: {G.out_degree(node)}",
    ]
    if in_chain:
        lines.append("✓ In chain")
    return "<br>".join(lines)


def create_closure_family_figure(family, title=None):
    """
    Draw the derivation graph of a closure family.

    Each member is a node, placed above the chains it was derived from and
    colored by its origin (empty, start, successor or union).

    Args:
        family: ClosureFamily
        title: Optional title

    Returns:
        plotly.graph_objects.Figure
    """
    G = family.to_graph()
    pos = compute_layout(G, 'hierarchical')

    node_x = []
    node_y = []
    hover = []
    colors = []

    for node in G.nodes():
        x, y = pos[node]
        node_x.append(x)
        node_y.append(y)

        chain = G.nodes[node]["chain"]
        kind = G.nodes[node]["origin"]
        members = ", ".join(sorted(str(c) for c in chain)) or "∅"
        hover.append("<br>".join([
            f"<b>Chain {node}</b>",
            f"Size: {len(chain)}",
            f"Origin: {kind}",
            f"Members: {{{members}}}",
        ]))
        colors.append(ORIGIN_COLORS.get(kind, NODE_COLOR))

    node_trace = go.Scatter(
        x=node_x,
        y=node_y,
        mode='markers+text',
        text=[str(node) for node in G.nodes()],
        textposition='middle right',
        hoverinfo='text',
        hovertext=hover,
        marker=dict(size=14, color=colors, line=dict(width=1, color='white'))
    )

    fig = go.Figure(data=[create_edge_trace(G, pos), node_trace])
    fig.update_layout(
        title=dict(text=title or f"Closure Family ({len(family)} chains)", font=dict(size=16)),
        showlegend=False,
        hovermode='closest',
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        plot_bgcolor='white',
        width=600,
        height=600
    )
    return fig


def create_comparison_figure(relations, titles=None, layout='hierarchical', chains=None):
    """
    Create a side-by-side comparison of several relations.

    Typical use is a partial order next to its linear extension.

    Args:
        relations: list of Relation objects
        titles: list of titles for each relation
        layout: Layout algorithm to use
        chains: optional list of chains to highlight, one per relation

    Returns:
        plotly.graph_objects.Figure with subplots
    """
    n_relations = len(relations)
    if titles is None:
        titles = [f"Relation {i+1}" for i in range(n_relations)]
    if chains is None:
        chains = [None] * n_relations

    fig = make_subplots(
        rows=1,
        cols=n_relations,
        subplot_titles=titles,
        horizontal_spacing=0.05
    )

    for i, (relation, chain) in enumerate(zip(relations, chains)):
        col = i + 1
        chain = frozenset(chain) if chain is not None else frozenset()

        G = hasse_graph(relation)
        pos = compute_layout(G, layout)

        fig.add_trace(create_edge_trace(G, pos), row=1, col=col)
        if chain:
            fig.add_trace(create_chain_edge_trace(relation, chain, pos), row=1, col=col)
        fig.add_trace(create_node_trace(relation, G, pos, chain, 12), row=1, col=col)

    fig.update_layout(
        showlegend=False,
        hovermode='closest',
        height=600,
        width=400 * n_relations
    )

    # Hide axes for all subplots
    fig.update_xaxes(showgrid=False, zeroline=False, showticklabels=False)
    fig.update_yaxes(showgrid=False, zeroline=False, showticklabels=False)

    return fig


def export_to_dot(relation, filename=None, chain=None):
    """
    Export the Hasse diagram of a relation to GraphViz DOT format.

    Args:
        relation: Relation
        filename: Optional filename to write to (if None, returns string)
        chain: Optional chain whose members are drawn in red

    Returns:
        str: DOT format string (if filename is None)
    """
    chain = frozenset(chain) if chain is not None else frozenset()

    lines = ['digraph G {', '  rankdir = BT;']

    for node in relation.carrier:
        if node in chain:
            lines.append(f'  "{node}" [color=red, fontcolor=red];')
        else:
            lines.append(f'  "{node}";')

    for lower, upper in relation.hasse_edges():
        lines.append(f'  "{lower}" -> "{upper}";')

    lines.append('}')

    dot_string = '\n'.join(lines)

    if filename:
        with open(filename, 'w') as f:
            f.write(dot_string)
        return None
    else:
        return dot_string
