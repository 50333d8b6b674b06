"""Serialize a config tree into btrbk.conf syntax."""

from .tree import ConfigNode

INDENT = " "


def render_lines(node: ConfigNode) -> list[str]:
    """Return the body lines of ``node``, relative to its own depth.

    All assignments come first, then each child as a header line
    followed by its body indented one more unit.
    """
    lines = []
    for key, value in node.assignments.items():
        if isinstance(value, tuple):
            lines.extend(value)
        else:
            lines.append(f"{key} {value}")

    for child in node.children:
        lines.append(f"{child.kind.value} {child.name}")
        lines.extend(INDENT + line for line in render_lines(child))

    return lines


def render(node: ConfigNode) -> str:
    """Render a root node to the text of a btrbk.conf file."""
    return "\n".join(render_lines(node)) + "\n"
