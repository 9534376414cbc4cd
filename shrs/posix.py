"""POSIX shell command language."""

from __future__ import annotations

import sys

from shrs.cmd_output import CmdOutput
from shrs.evaluate import eval_command, run_job
from shrs.jobutil import initialize_job_control
from shrs.lang import Lang
from shrs.lexer import LexError, Lexer, Token, TokenKind
from shrs.syntax import AsyncList, Command, NoOp, Pipeline, SeqList, SimpleCommand

_SEPARATORS = (TokenKind.SEMI, TokenKind.NEWLINE, TokenKind.AMP)


class PosixError(Exception):
    """Failure parsing or evaluating a POSIX command line."""


class _Unparsable(Exception):
    pass


def _parse_simple(tokens: list[Token]) -> Command:
    if not tokens or any(tok.kind is not TokenKind.WORD for tok in tokens):
        raise _Unparsable
    return SimpleCommand(args=[tok.text for tok in tokens])


def _parse_pipeline(tokens: list[Token]) -> Command:
    parts: list[list[Token]] = [[]]
    for tok in tokens:
        if tok.kind is TokenKind.PIPE:
            parts.append([])
        else:
            parts[-1].append(tok)
    cmd = _parse_simple(parts[0])
    for part in parts[1:]:
        cmd = Pipeline(cmd, _parse_simple(part))
    return cmd


def _parse(lexer: Lexer) -> Command:
    """Parse simple commands joined by pipes and separated by '&', ';' or newlines."""
    try:
        tokens = [tok for _, tok, _ in lexer]
    except LexError as err:
        raise _Unparsable from err

    segments: list[tuple[list[Token], TokenKind | None]] = []
    current: list[Token] = []
    for tok in tokens:
        if tok.kind in _SEPARATORS:
            if not current:
                if tok.kind is TokenKind.NEWLINE:
                    continue
                raise _Unparsable
            segments.append((current, tok.kind))
            current = []
        else:
            current.append(tok)
    if current:
        segments.append((current, None))

    cmd: Command | None = None
    for words, op in reversed(segments):
        pipeline = _parse_pipeline(words)
        if op is TokenKind.AMP:
            cmd = AsyncList(pipeline, cmd)
        elif op is None:
            cmd = pipeline
        else:
            cmd = SeqList(pipeline, cmd)
    return cmd if cmd is not None else NoOp()


def _tokens(lexer: Lexer):
    """Tokens of the lexer, skipping unrecognized characters."""
    while True:
        try:
            _, tok, _ = next(lexer)
        except LexError:
            continue
        except StopIteration:
            return
        yield tok


class PosixLang(Lang):
    """POSIX implementation of the shell command language."""

    def __init__(self, init_job_control: bool = True) -> None:
        if init_job_control:
            initialize_job_control()

    def eval(self, sh, ctx, rt, cmd: str) -> CmdOutput:
        try:
            parsed = _parse(Lexer(cmd))
        except _Unparsable:
            err = PosixError("Parse failed: unsuccessful parse")
            print(err, file=sys.stderr)
            raise err from None

        job_manager = sh.job_manager
        procs, pgid = eval_command(job_manager, parsed, None, None)
        run_job(job_manager, procs, pgid, True)
        return CmdOutput.success()

    def name(self) -> str:
        return "posix"

    def needs_line_check(self, command: str) -> bool:
        if command.endswith("\\"):
            return True

        brackets: list[TokenKind] = []
        closing = {TokenKind.RPAREN: TokenKind.LPAREN, TokenKind.RBRACE: TokenKind.LBRACE}

        for tok in _tokens(Lexer(command)):
            if tok.kind in (TokenKind.LBRACE, TokenKind.LPAREN):
                brackets.append(tok.kind)
            elif tok.kind in closing:
                if brackets:
                    if brackets[-1] is closing[tok.kind]:
                        brackets.pop()
                    else:
                        return False
            elif tok.kind is TokenKind.WORD and tok.text:
                quote = tok.text[0]
                if quote in "'\"":
                    if len(tok.text) == 1:
                        return True
                    return tok.text[-1] != quote

        return bool(brackets)