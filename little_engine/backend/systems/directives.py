"""Parser for the unlock directives a character may embed in a reply."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

from ..models import Directive, DirectiveKind

# 任何 [UNLOCK:...] 形式的标签都从显示文本中去掉，只有单个单词的才生效
DIRECTIVE_PATTERN = re.compile(r"\[\s*UNLOCK\s*:([^\]\[]*)\]", re.IGNORECASE)
FLAG_NAME_PATTERN = re.compile(r"^\w+$")
# 一串连续的标签连同两侧的空格
DIRECTIVE_RUN_PATTERN = re.compile(r"[ \t]*(?:" + DIRECTIVE_PATTERN.pattern + r"[ \t]*)+", re.IGNORECASE)


@dataclass
class ParsedReply:
    text: str
    directives: List[Directive] = field(default_factory=list)


def parse_directives(reply: str) -> ParsedReply:
    """Split a raw reply into display text and flag-unlock directives."""
    directives: List[Directive] = []
    seen = set()

    for match in DIRECTIVE_PATTERN.finditer(reply):
        name = match.group(1).strip()
        if not FLAG_NAME_PATTERN.match(name) or name in seen:
            continue
        seen.add(name)
        directives.append(Directive(kind=DirectiveKind.FLAG_UNLOCK, name=name))

    text = DIRECTIVE_RUN_PATTERN.sub(_join_around_tags, reply).strip()
    return ParsedReply(text=text, directives=directives)


def _join_around_tags(match: re.Match) -> str:
    # 标签夹在两个词之间时留一个空格，在行首行尾时不留
    source = match.string
    start, end = match.span()
    if start == 0 or end == len(source) or source[start - 1] == "\n" or source[end] == "\n":
        return ""
    return " "


def format_directive(flag: str) -> str:
    """The literal tag a character writes to set a flag."""
    return f"[UNLOCK:{flag}]"
