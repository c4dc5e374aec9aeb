"""Plotting utilities: DFA state diagrams and batch summary charts."""

from __future__ import annotations

from typing import Optional, Sequence

import matplotlib.pyplot as plt
import networkx as nx

from dfalab.core.types import DFA
from dfalab.measures.aggregate import BatchSummary

STATE_COLOR = "skyblue"
START_COLOR = "#59A14F"
TRACE_COLOR = "#E15759"
SUMMARY_COLORS = {
    "accepted": "#59A14F",
    "rejected": "#4E79A7",
    "errored": "#E15759",
    "skipped": "#BAB0AC",
}


def dfa_graph(dfa: DFA) -> nx.DiGraph:
    """Directed graph of the DFA; parallel transitions share one edge labelled with all their symbols."""
    graph = nx.DiGraph()
    graph.add_nodes_from(dfa.states)
    for (state, symbol), next_state in dfa.transitions.items():
        if graph.has_edge(state, next_state):
            graph[state][next_state]["symbols"].append(symbol)
        else:
            graph.add_edge(state, next_state, symbols=[symbol])
    return graph


def plot_dfa(dfa: DFA, ax=None, trace: Optional[Sequence[str]] = None, title: Optional[str] = None):
    """
    Draw the state diagram of a DFA.

    Args:
        dfa: Automaton to draw.
        ax: Matplotlib axes object (optional).
        trace: Visited states of one run; its edges are highlighted.
        title: Plot title.

    Returns:
        The axes the diagram was drawn on.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 6))

    graph = dfa_graph(dfa)
    pos = nx.spring_layout(graph, seed=42)

    trace_edges = set()
    if trace:
        for state in trace:
            if state not in dfa.state_index:
                raise ValueError(f"trace references unknown state: {state}")
        trace_edges = set(zip(trace[:-1], trace[1:]))

    node_colors = [START_COLOR if state == dfa.start else STATE_COLOR for state in graph.nodes]
    # Accepting states get a heavy outline in place of the textbook double circle.
    line_widths = [3.0 if state in dfa.accepting else 1.0 for state in graph.nodes]
    edge_colors = [TRACE_COLOR if edge in trace_edges else "gray" for edge in graph.edges]

    nx.draw_networkx_nodes(
        graph, pos, ax=ax, node_color=node_colors, node_size=900, edgecolors="black", linewidths=line_widths
    )
    nx.draw_networkx_labels(graph, pos, ax=ax, font_size=10, font_weight="bold")
    nx.draw_networkx_edges(
        graph,
        pos,
        ax=ax,
        edge_color=edge_colors,
        arrows=True,
        arrowstyle="-|>,head_length=0.7,head_width=0.4",
        node_size=900,
        connectionstyle="arc3,rad=0.1",
    )
    edge_labels = {(u, v): ",".join(symbols) for u, v, symbols in graph.edges(data="symbols")}
    nx.draw_networkx_edge_labels(graph, pos, edge_labels=edge_labels, ax=ax, font_size=9)

    ax.set_title(title if title is not None else "DFA")
    ax.set_axis_off()
    return ax


def plot_batch_summary(summary: BatchSummary, ax=None, title: Optional[str] = None):
    """
    Bar chart of accepted / rejected / errored / skipped line counts.

    Returns:
        The axes the chart was drawn on.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    labels = list(SUMMARY_COLORS)
    counts = [summary.accepted, summary.rejected, summary.errored, summary.skipped]
    ax.bar(labels, counts, color=[SUMMARY_COLORS[label] for label in labels])
    ax.set_ylabel("lines")
    ax.set_title(title if title is not None else summary.report.filename)
    return ax


def save_fig(fig, path: str) -> None:
    fig.savefig(path, dpi=200, bbox_inches="tight")
    plt.close(fig)
