"""PHP token stream built from a tree-sitter parse.

The stream is the list of leaves of the ``tree_sitter_php`` syntax tree in
source order. Comments, string bodies and inline HTML are single leaves, so
a ``function`` keyword token only ever comes from real PHP code.

The resulting token list is immutable; TokenCursor walks it strictly
forward.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

import tree_sitter
import tree_sitter_php


class TokenKind(Enum):
    KEYWORD = "keyword"
    NAME = "name"
    COMMENT = "comment"
    OTHER = "other"


# Keyword leaves are anonymous nodes whose type is the lower-cased word;
# the grammar matches them case-insensitively.
_KEYWORD_TYPE_RE = re.compile(r"[a-z_]+")

_CLASS_LIKE = frozenset(
    {"class_declaration", "interface_declaration", "trait_declaration", "enum_declaration"}
)


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    type: str  # tree-sitter node type
    text: str
    position: int  # index in the token list
    line: int  # 1-based line the token starts on
    owner: str | None = None  # innermost named class, interface, trait or enum

    @property
    def is_significant(self) -> bool:
        return self.kind is not TokenKind.COMMENT

    def is_keyword(self, word: str) -> bool:
        return self.kind is TokenKind.KEYWORD and self.type == word


@functools.cache
def _php_language() -> tree_sitter.Language:
    return tree_sitter.Language(tree_sitter_php.language_php())


def _classify(node: Any) -> TokenKind:
    if node.type == "comment":
        return TokenKind.COMMENT
    if node.type == "name":
        return TokenKind.NAME
    if not node.is_named and _KEYWORD_TYPE_RE.fullmatch(node.type):
        return TokenKind.KEYWORD
    return TokenKind.OTHER


def _text(content: bytes, node: Any) -> str:
    return content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _leaves(root: Any, content: bytes) -> Iterator[tuple[Any, str | None]]:
    """Yield (leaf, owning class name) pairs in source order."""
    stack: list[tuple[Any, str | None]] = [(root, None)]
    while stack:
        node, owner = stack.pop()
        if node.child_count == 0:
            yield node, owner
            continue
        if node.type in _CLASS_LIKE:
            name = node.child_by_field_name("name")
            if name is not None:
                owner = _text(content, name)
        stack.extend((child, owner) for child in reversed(node.children))


def tokenize(source: str) -> list[Token]:
    """Split PHP *source* (with inline HTML) into tokens.

    Never fails: tree-sitter recovers from syntax errors, and zero-width
    leaves inserted during recovery are dropped.
    """
    content = source.encode("utf-8")
    parser = tree_sitter.Parser()
    parser.language = _php_language()
    tree = parser.parse(content)

    tokens: list[Token] = []
    for node, owner in _leaves(tree.root_node, content):
        if node.start_byte == node.end_byte:
            continue
        tokens.append(
            Token(
                kind=_classify(node),
                type=node.type,
                text=_text(content, node),
                position=len(tokens),
                line=node.start_point[0] + 1,
                owner=owner,
            )
        )
    return tokens


class TokenCursor:
    """Forward-only cursor over a token list.

    Searches start strictly after the current position and move the cursor
    to the match. The cursor never rewinds, so consecutive searches follow
    the lexical order of the file.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._position = -1

    @property
    def position(self) -> int:
        return self._position

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._tokens) - 1

    def find_next(self, predicate: Callable[[Token], bool]) -> Token | None:
        for i in range(self._position + 1, len(self._tokens)):
            token = self._tokens[i]
            if predicate(token):
                self._position = i
                return token
        return None

    def next_significant(self, token: Token) -> Token | None:
        """First token after *token* that is not a comment."""
        for i in range(token.position + 1, len(self._tokens)):
            candidate = self._tokens[i]
            if candidate.is_significant:
                return candidate
        return None


def find_function_declaration(cursor: TokenCursor, name: str) -> Token | None:
    """Advance *cursor* to the next ``function <name>`` declaration.

    Returns the ``function`` keyword token, or None (cursor unchanged) when
    no such declaration follows. Closures (``function (``) never match.
    A by-reference marker (``function &name``) is skipped.
    """

    def is_declaration(token: Token) -> bool:
        if not token.is_keyword("function"):
            return False
        following = cursor.next_significant(token)
        if following is not None and following.type == "&":
            following = cursor.next_significant(following)
        return (
            following is not None
            and following.kind is TokenKind.NAME
            and following.text == name
        )

    return cursor.find_next(is_declaration)
