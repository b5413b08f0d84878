"""
treestate.commands.selected - Export the selected subset as JSON.

By default the selection is exported with its ancestors (hierarchical,
without internal state). ``--flat`` prints the selected nodes alone.
"""

from __future__ import annotations

import argparse
import json

from treestate.commands.common import load_tree
from treestate.tree.serialize import serialize_node


def run(args: argparse.Namespace) -> int:
    """Run the selected command."""
    tree = load_tree(args)
    tree.select_node(args.select)

    if args.flat:
        payload = [
            serialize_node(tree.model, node, include_state=False, include_children=False)
            for node in tree.get_selected()
        ]
    else:
        payload = tree.get_selected(hierarchy=True)

    print(json.dumps(payload, indent=args.indent))
    return 0
