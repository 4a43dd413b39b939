"""
Tree-sitter front-end for Go sources.

Builds parsers for the Go grammar, reads ``.go`` files and reports how
damaged a parse is. Downstream code only sees the tree through
``scanner.nodes``.
"""

import logging
from typing import Tuple
import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tsgo.language())


def create_parser() -> Parser:
    """Create a tree-sitter parser bound to the Go grammar.

    Example:
        >>> create_parser().parse(b"package main").root_node.type
        'source_file'
    """
    parser = Parser(GO_LANGUAGE)
    logger.debug("Created tree-sitter Go parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse Go source held in memory.

    Args:
        source: UTF-8 encoded Go source.

    Returns:
        The parsed tree. Syntax errors do not raise; they show up as ERROR
        or missing nodes (see ``count_error_nodes``).

    Raises:
        TypeError: If source is not bytes.
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)
    if tree.root_node.has_error:
        logger.debug("Go source of %d bytes parsed with errors", len(source))
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Read and parse one Go file.

    Returns:
        A tuple of (tree, raw source bytes); the bytes are needed to slice
        node text.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as handle:
            source_bytes = handle.read()
    except FileNotFoundError:
        logger.error("Go file not found: %s", file_path)
        raise
    except OSError as e:
        logger.error("Cannot read Go file %s: %s", file_path, e)
        raise

    tree = parse_bytes(source_bytes)
    logger.debug("Parsed %s (%d bytes)", file_path, len(source_bytes))
    return tree, source_bytes


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and missing nodes in a parsed tree."""
    count = 0
    stack = [tree.root_node]
    while stack:
        node: Node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            count += 1
        stack.extend(node.children)
    return count
