"""Built-in tags.

Single tags implement ``parse(arguments, env)`` and blocks implement
``parse(arguments, parser, env)``; both return a node with
``render_to(buf, runtime)``. The Environment registers everything here.
"""

from ladle.tags.include import INCLUDE_VARIABLE, Include, IncludeTag
from ladle.tags.standard import (
    STANDARD_BLOCKS,
    STANDARD_TAGS,
    AssignTag,
    CaptureBlock,
    CommentBlock,
    ForBlock,
    IfBlock,
    UnlessBlock,
)

__all__ = [
    "INCLUDE_VARIABLE",
    "STANDARD_BLOCKS",
    "STANDARD_TAGS",
    "AssignTag",
    "CaptureBlock",
    "CommentBlock",
    "ForBlock",
    "IfBlock",
    "Include",
    "IncludeTag",
    "UnlessBlock",
]
