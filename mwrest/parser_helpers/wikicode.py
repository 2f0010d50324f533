import re
from typing import Any

import mwparserfromhell
from mwparserfromhell.nodes import Comment, Heading, Node, Template, Text, Wikilink

from .title import canonicalize

__all__ = ["normalize_wikitext", "wikitext_equivalent"]

Token = tuple[Any, ...]


def _squash(text: Any) -> str:
    return re.sub(r"\s+", " ", str(text))


def _node_token(node: Node) -> Token:
    if isinstance(node, Wikilink):
        target = canonicalize(node.title)
        label = None
        if node.text is not None:
            label = _squash(node.text).strip()
            # [[Foo|Foo]] renders the same as [[Foo]]
            if label == _squash(node.title).strip():
                label = None
        return ("wikilink", target, label)
    if isinstance(node, Template):
        params = tuple(
            (str(param.name).strip(), _squash(param.value).strip())
            for param in node.params
        )
        return ("template", canonicalize(node.name), params)
    if isinstance(node, Heading):
        return ("heading", node.level, _squash(node.title).strip())
    return ("node", _squash(node))


def normalize_wikitext(text: str) -> list[Token]:
    """
    Parses the given wikitext with :py:mod:`mwparserfromhell` and returns a
    list of tokens which abstract away the differences that do not change the
    rendered page:

    - runs of whitespace are squashed into one space and whitespace around
      the whole snippet is dropped,
    - comments are dropped,
    - link targets and template names are canonicalized,
    - redundant link labels (``[[Foo|Foo]]``) are dropped.
    """
    wikicode = mwparserfromhell.parse(text)
    tokens: list[Token] = []
    for node in wikicode.nodes:
        if isinstance(node, Comment):
            continue
        if isinstance(node, Text):
            value = _squash(node.value)
            if tokens and tokens[-1][0] == "text":
                tokens[-1] = ("text", _squash(tokens[-1][1] + value))
            else:
                tokens.append(("text", value))
            continue
        tokens.append(_node_token(node))

    if tokens and tokens[0][0] == "text":
        tokens[0] = ("text", tokens[0][1].lstrip())
    if tokens and tokens[-1][0] == "text":
        tokens[-1] = ("text", tokens[-1][1].rstrip())
    return [token for token in tokens if token != ("text", "")]


def wikitext_equivalent(first: str, second: str) -> bool:
    """
    Returns ``True`` if the two wikitext snippets are semantically equivalent
    in the sense of :py:func:`normalize_wikitext`.
    """
    return normalize_wikitext(first) == normalize_wikitext(second)
