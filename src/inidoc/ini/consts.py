# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/10/12 22:41:05
# @Author : Kariko Lin

from enum import Enum


class IniState(str, Enum):
    """Scanner states. Each one has exactly one handler in `scanner`."""
    LINE_START = 'line-start'
    COMMENT = 'comment'
    SECTION = 'section'
    KEY = 'key'
    VALUE = 'value'
    VALUE_TRAIL = 'value-trail'
    QUOTED = 'quoted'
    QUOTED_TRAIL = 'quoted-trail'
    DONE = 'done'


SECTION_OPEN = '['
SECTION_CLOSE = ']'
ASSIGN = '='
BACKSLASH = '\\'
COMMENT_PREFIXES = (';', '#')
QUOTES = ('"', "'")
EOL_CHARS = ('\r', '\n')
# only these count as padding inside a line, `\r` and `\n` are boundaries.
BLANKS = (' ', '\t')

# `\x` -> control character
CONTROL_ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    'f': '\f',
    'b': '\b',
    '0': '\0',
}
# `\x` -> `x`, lets metacharacters live inside values.
LITERAL_ESCAPES = frozenset(';:=#\\\'"')

# reverse table for the writer.
ESCAPE_ON_WRITE = {v: k for k, v in CONTROL_ESCAPES.items()} | {
    '\\': '\\',
    '"': '"',
}
