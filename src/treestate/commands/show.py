"""
treestate.commands.show - Print a tree as indented text.

    treestate show nodes.json --expand-all
    treestate show nodes.json --expand a --select b --hide c
"""

from __future__ import annotations

import argparse
import sys

from treestate.commands.common import load_tree
from treestate.tree import TextRenderer, TreeState


def _apply_state_options(tree: TreeState, args: argparse.Namespace) -> None:
    with tree.batching():
        if args.expand_all:
            for node in list(tree.model.all_nodes()):
                tree.expand_node(node)
        for node_id in args.expand or []:
            tree.expand_node(node_id)
        tree.hide_nodes(args.hide or [])
        if args.select:
            tree.select_node(args.select)


def run(args: argparse.Namespace) -> int:
    """Run the show command."""
    render_cfg = args.resolved_config["render"]
    renderer = TextRenderer(
        sys.stdout,
        indent=int(render_cfg.get("indent", 2)),
        label_field=str(render_cfg.get("label_field", "text")),
        show_hidden=args.show_hidden or bool(render_cfg.get("show_hidden", False)),
    )
    tree = load_tree(args)
    _apply_state_options(tree, args)
    renderer.render_nodes(tree.model)
    return 0
