# -*- encoding: utf-8 -*-
# @File   : scanner.py
# @Time   : 2024/10/12 22:40:13
# @Author : Kariko Lin

"""Single pass INI scanner.

The scanner is a plain state machine: one `IniState` value plus
one handler per state. A handler reads from the `Cursor`, may write
into the document through `_ScanContext`, and returns the next state.
There is no token stream in between, what gets recognized goes
straight into the `IniDocument`.

Grammar in short (`<sp>` is space or tab):

    line      := <sp>* (section | comment | pair)? EOL
    section   := '[' name ']' <sp>*
    comment   := (';' | '#') any*
    pair      := key <sp>* '=' <sp>* value
    value     := quoted <sp>* | bare (<sp>+ comment?)? | bare comment
    quoted    := '"' ... '"' | "'" ... "'"

EOL is `\\n`, `\\r` or `\\r\\n`, end of input also closes a line.
Escapes (`\\n`, `\\;`, ...) only work inside values.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from io import TextIOBase
from typing import NoReturn
from warnings import warn

from .consts import (
    ASSIGN,
    BACKSLASH,
    BLANKS,
    COMMENT_PREFIXES,
    CONTROL_ESCAPES,
    EOL_CHARS,
    LITERAL_ESCAPES,
    QUOTES,
    SECTION_CLOSE,
    SECTION_OPEN,
    IniState,
)
from .model import IniDocument, IniSection

__all__ = [
    'IniSyntaxError', 'IniScannerFault',
    'Cursor', 'scan', 'DEFAULT_CHUNK_SIZE'
]

DEFAULT_CHUNK_SIZE = 4096


class IniSyntaxError(ValueError):
    """Input does not follow the INI grammar. Aborts the whole parse."""

    def __init__(self, message: str, line: int, offset: int = -1) -> None:
        super().__init__(message, line, offset)
        self.message = message
        self.line = line
        self.offset = offset

    def __str__(self) -> str:
        return f'{self.message} [line {self.line}]'


class IniScannerFault(RuntimeError):
    """Scanner reached a state its own dispatch should never allow.

    Not a user error: this means a bug in the scanner.
    """
    pass


class Cursor:
    """Read position over a text buffer or a text stream.

    Streams are pulled `chunk_size` characters at a time into a lookahead
    buffer, consumed text is dropped on each refill.
    """

    def __init__(
        self,
        source: str | TextIOBase,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f'chunk_size must be positive, got {chunk_size}')
        self._stream: TextIOBase | None
        if isinstance(source, str):
            self._buf, self._stream = source, None
        else:
            self._buf, self._stream = '', source
        self._chunk = chunk_size
        self._pos = 0
        self._base = 0  # absolute offset of `self._buf[0]`
        self.line = 1

    @property
    def offset(self) -> int:
        return self._base + self._pos

    def _fill(self, need: int) -> bool:
        while self._stream is not None and len(self._buf) - self._pos < need:
            chunk = self._stream.read(self._chunk)
            if not chunk:
                self._stream = None
                break
            self._base += self._pos
            self._buf = self._buf[self._pos:] + chunk
            self._pos = 0
        return len(self._buf) - self._pos >= need

    def peek(self, ahead: int = 0) -> str:
        """Character `ahead` positions after the cursor, `''` past EOF."""
        if not self._fill(ahead + 1):
            return ''
        return self._buf[self._pos + ahead]

    def advance(self, count: int = 1) -> None:
        self._pos += count

    def at_eol(self) -> bool:
        ch = self.peek()
        return not ch or ch in EOL_CHARS

    def skip_blanks(self) -> None:
        while self.peek() in BLANKS:
            self._pos += 1

    def read_until(self, stops: str) -> str:
        """Consume up to (not including) any char of `stops`, EOL or EOF."""
        ret: list[str] = []
        while (ch := self.peek()) and ch not in stops and ch not in EOL_CHARS:
            ret.append(ch)
            self._pos += 1
        return ''.join(ret)

    def newline(self) -> None:
        """Consume one line boundary. No-op at EOF."""
        ch = self.peek()
        if ch == '\r':
            self._pos += 1
            if self.peek() == '\n':
                self._pos += 1
        elif ch == '\n':
            self._pos += 1
        else:
            return
        self.line += 1


@dataclass
class _ScanContext:
    document: IniDocument
    section: IniSection
    lenient: bool = False
    key: str = ''
    quote: str = ''

    def store(self, value: str) -> None:
        self.section[self.key] = value


def _fail(cur: Cursor, reason: str) -> NoReturn:
    raise IniSyntaxError(reason, cur.line, cur.offset)


def _escape(cur: Cursor) -> str:
    """Cursor sits on a backslash. Consume the sequence, give its char."""
    nxt = cur.peek(1)
    if nxt in CONTROL_ESCAPES:
        cur.advance(2)
        return CONTROL_ESCAPES[nxt]
    if nxt in LITERAL_ESCAPES:
        cur.advance(2)
        return nxt
    # unknown (or EOF): keep the backslash, rescan what follows.
    cur.advance()
    return BACKSLASH


def _line_start(cur: Cursor, ctx: _ScanContext) -> IniState:
    ch = cur.peek()
    if not ch:
        return IniState.DONE
    if ch in EOL_CHARS:
        cur.newline()
        return IniState.LINE_START
    if ch.isspace():
        cur.advance()
        return IniState.LINE_START
    ctx.key, ctx.quote = '', ''
    if ch == SECTION_OPEN:
        cur.advance()
        return IniState.SECTION
    if ch in COMMENT_PREFIXES:
        cur.advance()
        return IniState.COMMENT
    return IniState.KEY


def _comment(cur: Cursor, ctx: _ScanContext) -> IniState:
    text = cur.read_until('')
    logging.debug('Comment (line %d): %s', cur.line, text)
    cur.newline()
    return IniState.LINE_START


def _section(cur: Cursor, ctx: _ScanContext) -> IniState:
    name = cur.read_until(SECTION_CLOSE)
    if cur.peek() != SECTION_CLOSE:
        _fail(cur, 'malformed section header: missing "]"')
    if not name:
        _fail(cur, 'malformed section header: empty name')
    cur.advance()
    cur.skip_blanks()
    if not cur.at_eol():
        _fail(cur, f'malformed section header: unexpected {cur.peek()!r}')
    ctx.section = ctx.document.section(name)
    logging.debug('Section: [%s]', name)
    cur.newline()
    return IniState.LINE_START


def _key(cur: Cursor, ctx: _ScanContext) -> IniState:
    ctx.key = cur.read_until(ASSIGN + ''.join(BLANKS))
    if cur.peek() in BLANKS:
        cur.skip_blanks()
        if not cur.at_eol() and cur.peek() != ASSIGN:
            _fail(cur, 'spaces not allowed in keys')
    if cur.peek() != ASSIGN:
        if not ctx.key:
            # `_line_start` only gets here on a non-blank, non-EOL char.
            raise IniScannerFault(
                f'empty key at end of line {cur.line} (offset {cur.offset})')
        _fail(cur, f'invalid assignment: "=" expected after {ctx.key!r}')
    if not ctx.key:
        _fail(cur, 'invalid assignment: missing key before "="')
    cur.advance()
    logging.debug('key [%s]', ctx.key)
    cur.skip_blanks()
    return IniState.VALUE


def _value(cur: Cursor, ctx: _ScanContext) -> IniState:
    if (ch := cur.peek()) in QUOTES:
        ctx.quote = ch
        cur.advance()
        return IniState.QUOTED

    buf: list[str] = []
    while True:
        ch = cur.peek()
        if not ch or ch in EOL_CHARS:
            ctx.store(''.join(buf).strip())
            cur.newline()
            return IniState.LINE_START
        if ch == BACKSLASH:
            buf.append(_escape(cur))
        elif ch in BLANKS:
            ctx.store(''.join(buf).strip())
            return IniState.VALUE_TRAIL
        elif ch in COMMENT_PREFIXES:
            ctx.store(''.join(buf).strip())
            cur.advance()
            return IniState.COMMENT
        else:
            buf.append(ch)
            cur.advance()


def _value_trail(cur: Cursor, ctx: _ScanContext) -> IniState:
    cur.skip_blanks()
    if cur.at_eol():
        cur.newline()
        return IniState.LINE_START
    if cur.peek() in COMMENT_PREFIXES:
        cur.advance()
        return IniState.COMMENT
    _fail(cur, 'whitespace in unescaped value')


def _quoted(cur: Cursor, ctx: _ScanContext) -> IniState:
    quote = ctx.quote
    buf: list[str] = []
    while True:
        ch = cur.peek()
        if not ch or ch in EOL_CHARS:
            if not ctx.lenient:
                _fail(cur, f'unclosed string value: missing {quote}')
            # keep the opening quote as a plain char.
            warn(f'line {cur.line}: unclosed string value for '
                 f'{ctx.key!r}, the opening {quote} is kept as text.')
            ctx.store((quote + ''.join(buf)).strip())
            cur.newline()
            return IniState.LINE_START
        if ch == quote:
            cur.advance()
            ctx.store(''.join(buf))
            return IniState.QUOTED_TRAIL
        if ch == BACKSLASH:
            buf.append(_escape(cur))
        else:
            buf.append(ch)
            cur.advance()


def _quoted_trail(cur: Cursor, ctx: _ScanContext) -> IniState:
    cur.skip_blanks()
    if not cur.at_eol():
        _fail(cur, 'invalid character after quoted value: '
                   f'{cur.peek()!r}')
    cur.newline()
    return IniState.LINE_START


_HANDLERS: dict[IniState, Callable[[Cursor, _ScanContext], IniState]] = {
    IniState.LINE_START: _line_start,
    IniState.COMMENT: _comment,
    IniState.SECTION: _section,
    IniState.KEY: _key,
    IniState.VALUE: _value,
    IniState.VALUE_TRAIL: _value_trail,
    IniState.QUOTED: _quoted,
    IniState.QUOTED_TRAIL: _quoted_trail,
}


def scan(
    source: str | TextIOBase,
    document: IniDocument | None = None, *,
    lenient: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> IniDocument:
    """Run the state machine over `source` and fill `document`.

    A new document is created when none given. Mind that on
    `IniSyntaxError` a given document is left half filled,
    `ini.parser.parse()` is the all-or-nothing entry.
    """
    if document is None:
        document = IniDocument()
    cur = Cursor(source, chunk_size)
    ctx = _ScanContext(document, document.root, lenient)
    state = IniState.LINE_START
    while state is not IniState.DONE:
        state = _HANDLERS[state](cur, ctx)
    return document
