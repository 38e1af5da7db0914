# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/10 01:04:45
# @Author : Kariko Lin

"""INI text <-> `IniDocument`.

`parse()` and `dumps()` work on strings (or text streams),
`IniParser` binds both to a file, guessing the codec when needed.
"""

import logging
from io import StringIO, TextIOBase
from os import PathLike

import chardet

from ..abstract import FileHandler
from .consts import (
    ASSIGN,
    BLANKS,
    COMMENT_PREFIXES,
    EOL_CHARS,
    ESCAPE_ON_WRITE,
    QUOTES,
    SECTION_CLOSE,
    SECTION_OPEN,
)
from .model import IniDocument, IniSection
from .scanner import DEFAULT_CHUNK_SIZE, scan

__all__ = ['parse', 'dumps', 'IniParser']

# any of these makes a bare value rescan differently.
_NEEDS_QUOTE = frozenset('\\' + ASSIGN + ''.join(COMMENT_PREFIXES + QUOTES))


def parse(
    source: str | TextIOBase, *,
    lenient: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> IniDocument:
    """Parse INI text (or a decoded text stream) into a read-only document.

    Raises `IniSyntaxError` on the first violation, nothing is returned
    in that case. With `lenient=True` an unclosed quoted value is taken
    literally (opening quote included) instead, with a warning.
    """
    ret = scan(source, lenient=lenient, chunk_size=chunk_size)
    ret.freeze()
    return ret


def _quote(value: str) -> str:
    if not any(c.isspace() or not c.isprintable() or c in _NEEDS_QUOTE
               for c in value):
        return value
    return '"%s"' % ''.join(
        '\\' + ESCAPE_ON_WRITE[c] if c in ESCAPE_ON_WRITE else c
        for c in value)


def _check_key(sect: IniSection, key: str) -> None:
    if (not key or key[0].isspace()
            or key[0] in (SECTION_OPEN,) + COMMENT_PREFIXES
            or any(c in key for c in (ASSIGN,) + BLANKS + EOL_CHARS)):
        raise ValueError(f'key {key!r} in {sect} can not be written as INI')


def _check_name(name: str) -> None:
    if not name or any(c in name for c in (SECTION_CLOSE,) + EOL_CHARS):
        raise ValueError(f'section name {name!r} can not be written as INI')


def _dump_pairs(sect: IniSection, delimiter: str) -> list[str]:
    ret = []
    for k, v in sect.items():
        _check_key(sect, k)
        ret.append(f'{k}{delimiter}{_quote(v)}')
    return ret


def dumps(
    doc: IniDocument, *,
    delimiter: str = ' = ',
    blank_lines: int = 1
) -> str:
    """Serialize `doc`, keeping section and key order.

    Values that would not read back the same are double quoted
    and escaped. Empty sections are kept too.
    `delimiter` should be `=` with optional spaces or tabs around.
    """
    if delimiter.strip(''.join(BLANKS)) != ASSIGN:
        raise ValueError(f'invalid delimiter {delimiter!r}')
    blocks: list[list[str]] = []
    if not doc.root.is_empty():
        blocks.append(_dump_pairs(doc.root, delimiter))
    for name, sect in doc.items():
        if name == IniDocument.ROOT:
            continue
        _check_name(name)
        blocks.append([f'[{name}]'] + _dump_pairs(sect, delimiter))
    sep = '\n' * (blank_lines + 1)
    return sep.join('\n'.join(i) for i in blocks) + ('\n' if blocks else '')


class IniParser(FileHandler[IniDocument]):
    def __init__(
        self, filename: str | PathLike[str], encoding: str | None = None
    ) -> None:
        super().__init__(filename)
        self._codec = encoding

    @staticmethod
    def readstream(
        buf: TextIOBase | str, *, lenient: bool = False
    ) -> IniDocument:
        """Read decoded text or a text stream.

        Just call `self.read()` if nothing special.
        """
        return parse(buf, lenient=lenient)

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if codec['encoding'] is None or codec['confidence'] < 0.8:
            codec = {'encoding': 'utf-8', 'confidence': 0.0}
        logging.warning(
            f'{filename}: decoding failed, retrying with {codec["encoding"]}')

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'])
        except (UnicodeDecodeError, LookupError):
            buf = raw.decode('latin-1')
        return StringIO(buf, newline='')

    def read(self, *, lenient: bool = False) -> IniDocument:
        """Read the file bound to this `IniParser`.

        When `encoding` is None, `open()` falls back to system default.
        A wrong codec ends in `UnicodeDecodeError`, then `chardet` guesses.
        """
        try:
            with open(self._fn, 'r', encoding=self._codec, newline='') as fp:
                return self.readstream(fp, lenient=lenient)
        except UnicodeDecodeError:
            return self.readstream(
                self._decode_file(self._fn), lenient=lenient)

    def write(
        self, instance: IniDocument, *,
        delimiter: str = ' = ',
        blank_lines: int = 1
    ) -> None:
        """Save to *one* INI file, `utf-8` if no encoding given."""
        text = dumps(instance, delimiter=delimiter, blank_lines=blank_lines)
        with open(self._fn, 'w', encoding=self._codec or 'utf-8',
                  newline='') as fp:
            fp.write(text)

    def __str__(self) -> str:
        return "INI file: " + super().__str__() + f" ({self._codec})"
