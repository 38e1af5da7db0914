# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/10 00:57:10
# @Author : Kariko Lin

"""
Basically INI Structure: ordered sections of ordered `str: str` pairs.

Nothing here parses or validates. See `ini.scanner` for that.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping
from typing import TypedDict


class IniSectionMeta(TypedDict):
    section: str
    pairs: dict[str, str]


class IniSection(MutableMapping[str, str]):
    """INI section dict.

    Keys are unique and keep the order they were *first* assigned in;
    overwriting a key updates the value in place.
    Values are always `str` (even if empty), no type conversion at all.
    """

    def __init__(
        self, section_name: str, /,
        pairs: Iterable[tuple[str, str]] | Mapping[str, str] = (),
        *, frozen: bool = False
    ) -> None:
        self._name = section_name
        self._data: dict[str, str] = dict(pairs)
        self._frozen = frozen

    @property
    def name(self) -> str:
        return self._name

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def size(self) -> int:
        return len(self._data)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        if self._frozen:
            raise TypeError(f'section {self} is read-only')
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        if self._frozen:
            raise TypeError(f'section {self} is read-only')
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IniSection):
            return NotImplemented
        return (self._name == other._name
                and list(self._data.items()) == list(other._data.items()))

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f"[{self._name}]"

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self._data))

    def set(self, key: str, value: str) -> None:
        self[key] = value

    def is_empty(self) -> bool:
        return not self._data

    def to_dict(self) -> dict[str, str]:
        """A plain (mutable, detached) copy of the pairs."""
        return self._data.copy()

    def get_sub(self, prefix: str) -> list[str]:
        """Distinct next dotted segment of keys under `prefix`.

        e.g. with `a.b.x`, `a.b.y`, `a.c` in section,
        `get_sub('a')` gives `['b', 'c']`,
        `get_sub('a.b')` gives `['x', 'y']`.
        """
        head = prefix + '.'
        ret: dict[str, None] = {}
        for i in self._data:
            if i.startswith(head):
                ret.setdefault(i[len(head):].split('.', 1)[0], None)
        return list(ret)

    def _freeze(self) -> None:
        self._frozen = True


class IniDocument(Mapping[str, IniSection]):
    """INI file representation.

        ```ini
        key = val  ; before any header, see `self.root`.

        [section]
        key233 = val666
        [section]  ; declared again, merges into the first one.
        key233 = val114514
        ```

    Sections keep the order of their first declaration.
    The root section always exists, keyed by `IniDocument.ROOT`.
    """
    # `[]` never makes it through the scanner, so no header clashes.
    ROOT = ''

    def __init__(self) -> None:
        self.__sections: dict[str, IniSection] = {
            self.ROOT: IniSection(self.ROOT)
        }
        self.__frozen = False

    @property
    def root(self) -> IniSection:
        """Pairs located at file head, not belonging to any section."""
        return self.__sections[self.ROOT]

    @property
    def frozen(self) -> bool:
        return self.__frozen

    def section(self, name: str) -> IniSection:
        """Get section `name`, create (and append) it if not exists yet.

        A frozen document is never extended: unknown names give
        an empty, read-only section which is *not* stored.
        """
        if name in self.__sections:
            return self.__sections[name]
        if self.__frozen:
            return IniSection(name, frozen=True)
        self.__sections[name] = ret = IniSection(name)
        return ret

    def __getitem__(self, key: str) -> IniSection:
        return self.__sections[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__sections

    def __len__(self) -> int:
        return len(self.__sections)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__sections)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IniDocument):
            return NotImplemented
        return (list(self.__sections) == list(other.__sections)
                and all(v == other.__sections[k]
                        for k, v in self.__sections.items()))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return '<IniDocument { .sections = %d, .root = %d%s }>' % (
            self.section_count(), self.root.size,
            ', frozen' if self.__frozen else '')

    def has_section(self, name: str) -> bool:
        return name != self.ROOT and name in self.__sections

    def section_count(self) -> int:
        """Explicitly declared sections only, root excluded."""
        return len(self.__sections) - 1

    def freeze(self) -> None:
        """Turn the document into a read-only snapshot. Not reversible,
        use `self.copy()` to get a writable one."""
        self.__frozen = True
        for i in self.__sections.values():
            i._freeze()

    def copy(self) -> 'IniDocument':
        ret = IniDocument()
        for name, sect in self.__sections.items():
            ret.section(name).update(sect)
        return ret

    def merge(self, another: 'IniDocument') -> None:
        """Copy all pairs of `another` into self.

        Existing values get overwritten, in place.
        """
        for name, sect in another.items():
            self.section(name).update(sect)

    def to_properties(
        self,
        resolver: Callable[[str, str], str] | None = None
    ) -> dict[str, str]:
        """Flatten into `{'section.key': value}`.

        Root pairs keep their bare key. Pass `resolver(section, key)`
        to join names some other way.
        """
        if resolver is None:
            def resolver(section: str, key: str) -> str:
                return f'{section}.{key}'

        ret = self.root.to_dict()
        for name, sect in self.__sections.items():
            if name == self.ROOT:
                continue
            for k, v in sect.items():
                ret[resolver(name, k)] = v
        return ret

    def get_sub(self, section: str, prefix: str) -> list[str]:
        return self.section(section).get_sub(prefix)

    def _get_meta(self, key: str) -> IniSectionMeta:
        """for converters."""
        return IniSectionMeta(
            section=key,
            pairs=self.__sections[key].to_dict()
        )

    def _set_meta(self, meta: IniSectionMeta) -> None:
        """for converters."""
        self.section(meta['section']).update(meta['pairs'])
