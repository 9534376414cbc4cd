"""Tokenizer for the POSIX shell command language."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto

RESERVED_WORDS = [
    "!", "{", "}", "case", "do", "done", "elif", "else", "esac", "fi", "for", "if", "in",
    "then", "until", "while",
]


class TokenKind(Enum):
    NEWLINE = auto()
    SEMI = auto()
    AMP = auto()
    PIPE = auto()
    BACKTICK = auto()
    EQUAL = auto()
    BACKSLASH = auto()
    SINGLEQUOTE = auto()
    DOUBLEQUOTE = auto()
    LESS = auto()
    GREAT = auto()

    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    BANG = auto()

    AND_IF = auto()
    OR_IF = auto()
    DSEMI = auto()

    DLESS = auto()
    DGREAT = auto()
    LESSAND = auto()
    GREATAND = auto()
    LESSGREAT = auto()
    DLESSDASH = auto()
    CLOBBER = auto()

    IF = auto()
    THEN = auto()
    ELSE = auto()
    ELIF = auto()
    FI = auto()
    DO = auto()
    DONE = auto()

    CASE = auto()
    ESAC = auto()
    WHILE = auto()
    UNTIL = auto()
    FOR = auto()
    IN = auto()

    WORD = auto()
    ASSIGNMENT_WORD = auto()
    FNAME = auto()
    NAME = auto()
    IO_NUMBER = auto()


@dataclass(frozen=True)
class Token:
    """A token; word-like kinds carry their text."""

    kind: TokenKind
    text: str | None = None


Spanned = tuple[int, Token, int]


class LexError(Exception):
    """A character that cannot start any token."""

    def __init__(self, start: int, ch: str, end: int) -> None:
        super().__init__(f"unrecognized character {ch} in range {start}:{end}")
        self.start = start
        self.ch = ch
        self.end = end


_KEYWORDS = {
    "if": TokenKind.IF,
    "then": TokenKind.THEN,
    "else": TokenKind.ELSE,
    "elif": TokenKind.ELIF,
    "fi": TokenKind.FI,
    "do": TokenKind.DO,
    "done": TokenKind.DONE,
    "case": TokenKind.CASE,
    "esac": TokenKind.ESAC,
    "while": TokenKind.WHILE,
    "until": TokenKind.UNTIL,
    "for": TokenKind.FOR,
    "in": TokenKind.IN,
}

# First character -> (kind when alone, {second character: kind of the pair})
_COMPOUND = {
    ";": (TokenKind.SEMI, {";": TokenKind.DSEMI}),
    "&": (TokenKind.AMP, {"&": TokenKind.AND_IF}),
    "|": (TokenKind.PIPE, {"|": TokenKind.OR_IF}),
    "<": (
        TokenKind.LESS,
        {"<": TokenKind.DLESS, "&": TokenKind.LESSAND, ">": TokenKind.LESSGREAT},
    ),
    ">": (
        TokenKind.GREAT,
        {">": TokenKind.DGREAT, "&": TokenKind.GREATAND, "|": TokenKind.CLOBBER},
    ),
}

_SINGLE = {
    "`": TokenKind.BACKTICK,
    "=": TokenKind.EQUAL,
    "\\": TokenKind.BACKSLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "!": TokenKind.BANG,
}

_WORD_BREAKERS = frozenset(";)(`!\\'\"><&|{}*")


def _is_whitespace(ch: str) -> bool:
    # Unicode White_Space, which unlike str.isspace excludes the separators \x1c-\x1f
    return ch.isspace() and ch not in "\x1c\x1d\x1e\x1f"


def _is_word_continue(ch: str) -> bool:
    return ch not in _WORD_BREAKERS and not _is_whitespace(ch)


def _is_word_start(ch: str) -> bool:
    code = ord(ch)
    if code == 0x7F or code <= 0x1F or 0x80 <= code <= 0x9F:
        return False
    return _is_word_continue(ch)


class Lexer:
    """Iterator of (start, token, end) triples over a command line.

    Positions are character offsets. An unrecognized character raises
    LexError; calling next() again resumes after it.
    """

    def __init__(self, input: str) -> None:
        self.input = input
        self._chars = iter(enumerate(input))
        self._lookahead: tuple[int, str, int] | None = None
        self._pull()

    def _pull(self) -> None:
        nxt = next(self._chars, None)
        self._lookahead = None if nxt is None else (nxt[0], nxt[1], nxt[0] + 1)

    def _advance(self) -> tuple[int, str, int] | None:
        current = self._lookahead
        if current is not None:
            self._pull()
        return current

    def _take_until(self, start: int, end: int, terminate) -> tuple[str, int]:
        while self._lookahead is not None:
            if terminate(self._lookahead[1]):
                return self.input[start:end], end
            advanced = self._advance()
            if advanced is not None:
                end = advanced[2]
        return self.input[start:end], end

    def _take_until_inclusive(self, start: int, end: int, terminate) -> tuple[str, int]:
        while self._lookahead is not None:
            if terminate(self._lookahead[1]):
                return self.input[start:end + 1], end + 1
            advanced = self._advance()
            if advanced is not None:
                end = advanced[2]
        return self.input[start:end], end

    def _keyword(self, start: int, end: int) -> Spanned:
        word, end = self._take_until(start, end, lambda ch: not _is_word_continue(ch))
        kind = _KEYWORDS.get(word)
        token = Token(kind) if kind is not None else Token(TokenKind.WORD, word)
        return start, token, end

    def _quoted(self, start: int, end: int, quote: str) -> Spanned:
        _, end = self._take_until_inclusive(start, end, lambda ch: ch == quote)
        self._advance()
        return start, Token(TokenKind.WORD, self.input[start:end]), end

    def __iter__(self) -> Iterator[Spanned]:
        return self

    def __next__(self) -> Spanned:
        while (current := self._advance()) is not None:
            start, ch, end = current
            if ch == "\n":
                return start, Token(TokenKind.NEWLINE), end
            if ch in _COMPOUND:
                alone, pairs = _COMPOUND[ch]
                following = self._lookahead
                if following is not None and following[1] in pairs:
                    self._advance()
                    return start, Token(pairs[following[1]]), following[2]
                return start, Token(alone), end
            if ch in _SINGLE:
                return start, Token(_SINGLE[ch]), end
            if ch in "'\"":
                return self._quoted(start, end, ch)
            if _is_word_start(ch):
                return self._keyword(start, end)
            if _is_whitespace(ch):
                continue
            raise LexError(start, ch, end)
        raise StopIteration