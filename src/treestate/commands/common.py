"""Helpers shared by the CLI commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from treestate.config import get_config
from treestate.tree import Renderer, TreeState


def read_nodes(source: str) -> Any:
    """Read a JSON array of raw nodes from a file path, or stdin for ``-``."""
    if source == "-":
        return json.load(sys.stdin)
    return json.loads(Path(source).read_text(encoding="utf-8"))


def load_tree(args: argparse.Namespace, renderer: Renderer | None = None) -> TreeState:
    """Build a TreeState from the command's config and input file.

    Raises:
        MalformedNodeError: If the input is not a list of well-formed nodes.
    """
    config = getattr(args, "resolved_config", None) or get_config(getattr(args, "config", None))
    tree = TreeState.from_config(config, renderer=renderer)
    # Resolved sources complete synchronously; result() re-raises load errors.
    tree.load(read_nodes(args.file)).result()
    return tree
