# -*- encoding: utf-8 -*-
# @File   : convert.py
# @Time   : 2024/10/14 21:08:52
# @Author : Kariko Lin

"""`IniDocument` to and from JSON / YAML.

Both formats use the same shape:

    {"": {"root_key": "..."}, "section": {"key": "value"}}

i.e. the root section sits under the empty name. Order is kept.
"""

import json
from os import PathLike
from time import localtime, strftime
from typing import Any, TypedDict

import yaml

from ..abstract import FileHandler
from .model import IniDocument, IniSectionMeta

__all__ = ['InvalidIniRecord', 'IniJsonParser', 'IniYamlParser']


class InvalidIniRecord(ValueError):
    """To record errors when converting from JSON / YAML."""
    pass


class _YamlMetaPack(TypedDict):
    sections: int
    build_time: str


def _to_mapping(doc: IniDocument) -> dict[str, dict[str, str]]:
    return {k: doc._get_meta(k)['pairs'] for k in doc}


def _from_mapping(src: Any) -> IniDocument:
    if not isinstance(src, dict):
        raise InvalidIniRecord(
            f'expecting a mapping of sections, got {type(src).__name__}')
    ret = IniDocument()
    for name, pairs in src.items():
        if not isinstance(name, str):
            raise InvalidIniRecord(f'section name {name!r} is not a string')
        if pairs is None:  # empty section in YAML
            pairs = {}
        if not isinstance(pairs, dict):
            raise InvalidIniRecord(f'section [{name}] is not a mapping')
        meta = IniSectionMeta(section=name, pairs={})
        for k, v in pairs.items():
            if not isinstance(k, str):
                raise InvalidIniRecord(f'key {k!r} in [{name}] is not a string')
            if isinstance(v, (dict, list)):
                raise InvalidIniRecord(f'[{name}] {k} is not a scalar')
            # YAML may type `1`, `yes`, `~` for us, INI values are text.
            meta['pairs'][k] = '' if v is None else str(v)
        ret._set_meta(meta)
    return ret


class IniJsonParser(FileHandler[IniDocument]):
    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8'
    ) -> None:
        super().__init__(filename)
        self._codec = encoding

    def read(self) -> IniDocument:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            try:
                src = json.load(fp)
            except json.JSONDecodeError as e:
                raise InvalidIniRecord(f'{self._fn}: {e}') from e
        return _from_mapping(src)

    def write(self, instance: IniDocument, indent: int = 2) -> None:
        with open(self._fn, 'w', encoding=self._codec) as fp:
            json.dump(_to_mapping(instance), fp,
                      ensure_ascii=False, indent=indent)


class IniYamlParser(FileHandler[IniDocument]):
    """Two documents in one stream: a small metadata header, then data.

    Plain single document YAML files are also accepted on reading.
    """

    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8'
    ) -> None:
        super().__init__(filename)
        self._codec = encoding

    def read(self) -> IniDocument:
        with open(self._fn, 'r', encoding=self._codec) as fp:
            try:
                docs = list(yaml.safe_load_all(fp))
            except yaml.YAMLError as e:
                raise InvalidIniRecord(f'{self._fn}: {e}') from e
        match docs:
            case [_, data]:
                return _from_mapping(data)
            case [data]:
                return _from_mapping(data)
            case _:
                raise InvalidIniRecord(
                    f'{self._fn}: expecting 1 or 2 YAML documents, '
                    f'got {len(docs)}')

    def write(self, instance: IniDocument, indent: int = 2) -> None:
        header = _YamlMetaPack(
            sections=instance.section_count(),
            build_time=strftime("%Y-%m-%d %H:%M:%S", localtime()))
        with open(self._fn, 'w', encoding=self._codec) as fp:
            yaml.safe_dump_all(
                [dict(header), _to_mapping(instance)], fp,
                allow_unicode=True, sort_keys=False,
                default_flow_style=False, indent=indent)
