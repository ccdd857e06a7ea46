# -*- coding: utf-8 -*-

# Copyright 2019 Julian Betz
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#      http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Typed records produced by the parsers and owned by the persistent store.

All records are immutable.  List-valued attributes are tuples that are either
non-empty or ``None``: consumers distinguish an absent attribute from one that
is present, so an empty tuple is never stored (see :func:`compact`).

"""


from collections import namedtuple


def compact(values):
    """Freeze ``values`` into a tuple, mapping empty iterables to ``None``.

    :param values: An iterable or ``None``.

    :return: A non-empty tuple, or ``None`` if ``values`` is ``None`` or yields
        no elements.

    """
    if values is None:
        return None
    values = tuple(values)
    return values if values else None


UsageExample = namedtuple('UsageExample', ('source', 'text', 'sentences'))
"""A usage example attached to a sense: source label, example text and the
sentences it consists of (a tuple, possibly ``None``)."""

SourceLanguage = namedtuple('SourceLanguage', ('language', 'text', 'wasei'))
"""Source-language annotation of a loanword.

``text`` is the original expression (``None`` if not given), ``wasei`` marks
expressions constructed in Japanese from foreign words.

"""


_LEXICON_LISTS = ('kanji_forms', 'kanji_info', 'kanji_priority', 'readings',
                  'reading_no_kanji', 'reading_restrictions', 'reading_info',
                  'reading_priority', 'pos', 'cross_references', 'antonyms',
                  'fields', 'misc', 'sense_info', 'source_languages',
                  'dialects', 'glosses', 'examples')


class LexiconEntry(namedtuple('LexiconEntry', ('sequence_id',) + _LEXICON_LISTS)):
    """One JMdict headword with its written forms, readings and senses.

    Only ``sequence_id`` and ``readings`` are mandatory; every other attribute
    defaults to ``None``.  Constructing an entry through :meth:`create`
    compacts all list-valued attributes.

    """

    __slots__ = ()

    LIST_FIELDS = _LEXICON_LISTS


    @classmethod
    def create(cls, sequence_id, readings, **lists):
        values = {name: compact(lists.get(name)) for name in _LEXICON_LISTS}
        values['readings'] = compact(readings)
        if values['readings'] is None:
            raise ValueError('Entry %d has no reading' % (sequence_id,))
        return cls(sequence_id=sequence_id, **values)


    def matches(self, term):
        """Whether ``term`` is one of the written forms, readings or glosses."""
        return any(values is not None and term in values
                   for values in (self.kanji_forms, self.readings,
                                  self.glosses))


_CHARACTER_FIELDS = ('literal', 'unicode', 'jis_code', 'classical_radical',
                     'nelson_radical', 'grade', 'stroke_count', 'frequency',
                     'jlpt_level', 'nelson_classic', 'nelson_new', 'njecd',
                     'kanji_learners', 'heisig', 'skip_code', 'four_corner',
                     'deroo', 'pinyin', 'korean_r', 'korean_h', 'vietnamese',
                     'on_readings', 'kun_readings', 'nanori', 'meanings',
                     'variants')


class CharacterEntry(namedtuple('CharacterEntry', _CHARACTER_FIELDS)):
    """One KANJIDIC2 character and its metadata.

    Foreign readings are tuples in document order, like the Japanese ones.
    ``meanings`` maps language codes to tuples of glosses, in document order.
    ``variants`` is a tuple of ``(variant_type, value)`` pairs.

    """

    __slots__ = ()

    LIST_FIELDS = ('pinyin', 'korean_r', 'korean_h', 'vietnamese',
                   'on_readings', 'kun_readings', 'nanori', 'variants')


    @classmethod
    def create(cls, literal, **values):
        if not isinstance(literal, str) or len(literal) != 1:
            raise ValueError('Literal %r is not a single character'
                             % (literal,))
        fields = {name: values.get(name) for name in _CHARACTER_FIELDS[1:]}
        for name in CharacterEntry.LIST_FIELDS:
            fields[name] = compact(fields[name])
        meanings = fields['meanings']
        if meanings is not None:
            meanings = {language: compact(glosses)
                        for language, glosses in meanings.items()}
            meanings = {language: glosses
                        for language, glosses in meanings.items()
                        if glosses is not None} or None
        fields['meanings'] = meanings
        return cls(literal=literal, **fields)


ExampleSentence = namedtuple('ExampleSentence',
                             ('id', 'language', 'text', 'created_at',
                              'updated_at'))
ExampleSentence.__new__.__defaults__ = (None, None)
ExampleSentence.__doc__ = """One Tatoeba sentence.

Timestamps are assigned by the store on insertion and are ``None`` for freshly
parsed sentences.

"""
