"""slotflow utilities: logging, metrics, the event bus and graph inspection.

Import submodules directly, e.g. ``from slotflow.utils.dag import show_graph_tree``.
"""
