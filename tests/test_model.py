import pytest

from inidoc import IniDocument, IniSection


def test_root_section_always_exists():
    doc = IniDocument()
    assert list(doc) == [IniDocument.ROOT]
    assert doc.root is doc.section(IniDocument.ROOT)
    assert doc.root.is_empty()
    assert doc.section_count() == 0
    assert not doc.has_section(IniDocument.ROOT)


def test_section_is_created_once():
    doc = IniDocument()
    first = doc.section('server')
    assert doc.section('server') is first
    assert doc.has_section('server')
    assert doc.section_count() == 1
    assert len(doc) == 2


def test_getitem_does_not_create():
    doc = IniDocument()
    with pytest.raises(KeyError):
        doc['missing']
    assert 'missing' not in doc


def test_sections_keep_creation_order():
    doc = IniDocument()
    for name in ('zeta', 'alpha', 'mid', 'alpha'):
        doc.section(name)
    assert list(doc) == ['', 'zeta', 'alpha', 'mid']


def test_overwrite_keeps_position_and_size():
    sect = IniSection('s')
    sect.set('a', '1')
    sect.set('b', '2')
    sect.set('c', '3')
    size = sect.size
    sect.set('b', '20')
    assert sect.size == size == 3
    assert list(sect.items()) == [('a', '1'), ('b', '20'), ('c', '3')]


def test_get_has_no_default():
    sect = IniSection('s', {'a': ''})
    assert sect.get('a') == ''
    assert sect.get('b') is None
    with pytest.raises(KeyError):
        sect['b']


def test_section_equality_is_ordered():
    a = IniSection('s', [('x', '1'), ('y', '2')])
    b = IniSection('s', [('y', '2'), ('x', '1')])
    assert a != b
    assert a == IniSection('s', {'x': '1', 'y': '2'})
    assert a != IniSection('t', {'x': '1', 'y': '2'})


def test_document_equality_is_ordered():
    a, b = IniDocument(), IniDocument()
    a.section('one')
    a.section('two')
    b.section('two')
    b.section('one')
    assert a != b
    b = IniDocument()
    b.section('one')
    b.section('two')
    assert a == b


def test_freeze_makes_read_only():
    doc = IniDocument()
    doc.section('s').set('k', 'v')
    doc.freeze()
    assert doc.frozen and doc['s'].frozen and doc.root.frozen
    with pytest.raises(TypeError):
        doc['s']['k'] = 'w'
    with pytest.raises(TypeError):
        del doc['s']['k']
    assert doc['s']['k'] == 'v'


def test_frozen_document_does_not_grow():
    doc = IniDocument()
    doc.freeze()
    ghost = doc.section('ghost')
    assert ghost.is_empty() and ghost.frozen
    assert 'ghost' not in doc
    assert doc.section('ghost') is not ghost


def test_copy_is_writable_and_detached():
    doc = IniDocument()
    doc.root['a'] = '1'
    doc.section('s')['b'] = '2'
    doc.freeze()
    dup = doc.copy()
    assert dup == doc
    assert not dup.frozen
    dup.section('s')['b'] = '3'
    assert doc['s']['b'] == '2'


def test_merge_overwrites_and_appends():
    ini1 = IniDocument()
    ini1.root.update({'a': '2', 'b': '19'})
    ini1.section('section')['c'] = '3'

    ini2 = IniDocument()
    ini2.root.update({'a': '52', 'd': '22'})
    ini2.section('section')['c'] = '3'
    ini2.section('section 2')['alpha'] = '33.2'

    ini1.merge(ini2)
    assert ini1.has_section('section 2')
    assert list(ini1.root.items()) == [('a', '52'), ('b', '19'), ('d', '22')]
    assert list(ini1) == ['', 'section', 'section 2']


def _properties_doc() -> IniDocument:
    doc = IniDocument()
    doc.root.update({'a': '2', 'b': '3'})
    doc.section('booleans').update({'a': 'true', 'b': 'false'})
    return doc


def test_to_properties():
    props = _properties_doc().to_properties()
    assert props == {
        'a': '2', 'b': '3', 'booleans.a': 'true', 'booleans.b': 'false'
    }


def test_to_properties_with_resolver():
    props = _properties_doc().to_properties(lambda s, k: f'{s}:{k}')
    assert len(props) == 4
    assert props['booleans:a'] == 'true'
    assert props['a'] == '2'


def test_get_sub():
    doc = IniDocument()
    for i in range(4):
        doc.root[f'test.id.{i}'] = str(i)
    for i in range(2):
        doc.section('section 1')[f'a.b.string.{i}'] = str(i)

    assert doc.root.get_sub('test') == ['id']
    assert doc.root.get_sub('test.id') == ['0', '1', '2', '3']
    assert doc.root.get_sub('test.child') == []
    assert doc.get_sub('section 1', 'a') == ['b']
    assert doc.get_sub('section 1', 'a.b.string') == ['0', '1']


def test_repr():
    sect = IniSection('s', {'a': '1'})
    assert str(sect) == '[s]'
    assert repr(sect) == '[s] { .cnt = 1 }'
    doc = IniDocument()
    doc.section('s')
    assert repr(doc) == '<IniDocument { .sections = 1, .root = 0 }>'
