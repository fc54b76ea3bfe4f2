from collections import OrderedDict
from datetime import datetime

from mongodoc_lib.document import (
    clean_nulls,
    doc_to_modifier,
    expand_obj,
    is_basic_object,
    obj_affects_key,
    report_nulls,
)
from mongodoc_lib.document.markers import MISSING


def test_doc_to_modifier_splits_set_and_unset():
    modifier = doc_to_modifier({'a': None, 'b': '', 'c': 1, 'd': []})
    assert modifier == {'$set': {'c': 1}, '$unset': {'a': '', 'b': '', 'd': ''}}


def test_doc_to_modifier_keep_empty_strings():
    modifier = doc_to_modifier({'b': '', 'c': 1}, keep_empty_strings=True)
    assert modifier == {'$set': {'b': '', 'c': 1}}


def test_doc_to_modifier_flattens_arrays_by_default():
    doc = {'a': {'b': 1, 'c': None}, 'tags': ['x', 'y']}
    assert doc_to_modifier(doc) == {
        '$set': {'a.b': 1, 'tags.0': 'x', 'tags.1': 'y'},
        '$unset': {'a.c': ''},
    }


def test_doc_to_modifier_keep_arrays():
    doc = {'a': {'b': 1, 'c': None}, 'tags': ['x', 'y']}
    assert doc_to_modifier(doc, keep_arrays=True) == {
        '$set': {'a.b': 1, 'tags': ['x', 'y']},
        '$unset': {'a.c': ''},
    }


def test_doc_to_modifier_unsets_arrays_of_nulls():
    assert doc_to_modifier({'tags': [None, '']}, keep_arrays=True) == {'$unset': {'tags': ''}}


def test_doc_to_modifier_empty():
    assert doc_to_modifier({}) == {}


def test_doc_to_modifier_keeps_opaque_values():
    when = datetime(2021, 5, 1)
    assert doc_to_modifier({'when': when}) == {'$set': {'when': when}}


def test_clean_nulls():
    doc = {'a': None, 'b': {'c': '', 'd': 1}, 'e': [None, 2, {'f': None}], 'g': {'h': None}, 'i': MISSING}
    assert clean_nulls(doc) == {'b': {'d': 1}, 'e': [2]}


def test_clean_nulls_keep_empty_strings():
    assert clean_nulls({'a': '', 'b': None}, keep_empty_strings=True) == {'a': ''}
    assert clean_nulls(['', None, 0], is_array=True, keep_empty_strings=True) == ['', 0]


def test_clean_nulls_does_not_touch_source():
    doc = {'a': {'b': None}}
    clean_nulls(doc)
    assert doc == {'a': {'b': None}}


def test_report_nulls():
    flat = {'a': None, 'b': '', 'c': 0, 'd': [None], 'e': [1], 'f': MISSING, 'g': False}
    assert report_nulls(flat) == {'a': '', 'b': '', 'd': '', 'f': ''}
    assert report_nulls({'b': ''}, keep_empty_strings=True) == {}


def test_is_basic_object():
    assert is_basic_object({})
    assert not is_basic_object(OrderedDict())
    assert not is_basic_object([])
    assert not is_basic_object(None)
    assert not is_basic_object(datetime(2021, 1, 1))

    class Custom:
        pass

    assert not is_basic_object(Custom())


def test_expand_obj():
    assert expand_obj({'a.b': 1, 'a.c.0': 2, 'd': 3}) == {'a': {'b': 1, 'c': [2]}, 'd': 3}


def test_expand_obj_does_not_overwrite_scalars():
    assert expand_obj({'a': 1, 'a.b': 2}) == {'a': 1}


def test_obj_affects_key():
    assert obj_affects_key({'$set': {'a': 1}}, 'a')
    assert not obj_affects_key({'$set': {'a': 1}}, 'b')


def test_clean_nulls_shifts_list_items():
    assert clean_nulls([None, 1], is_array=True) == [1]
    assert clean_nulls({'a': [None, {'b': None}, 'x']}) == {'a': ['x']}
