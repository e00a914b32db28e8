import logging
from typing import TYPE_CHECKING

from .errors import CircularReferenceError

if TYPE_CHECKING:
    from .values import Value

logger = logging.getLogger(__name__)


def find_cycle(root: "Value") -> "Value | None":
    """Return the first composite found inside its own ancestor path, if any.

    Only nodes on the active path are tracked, by identity: the same child
    shared by two sibling branches is not a cycle, and neither are two
    distinct containers that merely compare equal.
    """
    if not root.is_composite():
        return None

    return _visit(root, set())


def _visit(node: "Value", ancestors: set[int]) -> "Value | None":
    ancestors.add(id(node))

    found = None
    for child in node.children():
        if not child.is_composite():
            continue

        if id(child) in ancestors:
            found = child
        else:
            found = _visit(child, ancestors)

        if found is not None:
            break

    ancestors.discard(id(node))
    return found


def has_cycle(root: "Value") -> bool:
    return find_cycle(root) is not None


def check_cycles(root: "Value") -> None:
    if find_cycle(root) is not None:
        kind = type(root).__name__
        logger.debug(f"Refusing to encode {kind} at {id(root):#x}: circular reference")
        raise CircularReferenceError(
            f"Upon encoding, circular reference found in {kind}"
        )
