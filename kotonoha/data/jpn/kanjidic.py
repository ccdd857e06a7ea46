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


"""Parse KANJIDIC2 ``<character>`` records into :class:`CharacterEntry`
records."""


from . import element_text, texts, safe_int, parse_xml
from ..records import CharacterEntry
from ...errors import MalformedRecord


TAG = 'character'
"""Name of the record element in KANJIDIC2."""

DEFAULT_MEANING_LANGUAGE = 'en'
"""Language of meanings without an ``m_lang`` attribute."""

# Sub-element kind -> attribute of the character entry, per typed element
CODEPOINTS = {'ucs': 'unicode', 'jis208': 'jis_code'}
RADICALS = {'classical': 'classical_radical', 'nelson_c': 'nelson_radical'}
DICTIONARY_REFERENCES = {'nelson_c': 'nelson_classic',
                         'nelson_n': 'nelson_new',
                         'halpern_njecd': 'njecd',
                         'halpern_kkld': 'kanji_learners',
                         'heisig': 'heisig'}
QUERY_CODES = {'skip': 'skip_code', 'four_corner': 'four_corner',
               'deroo': 'deroo'}
FOREIGN_READINGS = {'pinyin': 'pinyin', 'korean_r': 'korean_r',
                    'korean_h': 'korean_h', 'vietnam': 'vietnamese'}
INTEGER_FIELDS = {'classical_radical', 'nelson_radical', 'nelson_classic',
                  'nelson_new', 'njecd', 'kanji_learners', 'heisig'}


def _dispatch(values, elements, attribute, targets):
    # The first occurrence of a kind wins
    for element in elements:
        target = targets.get(element.get(attribute))
        if target is None or target in values:
            continue
        text = element_text(element)
        if target in INTEGER_FIELDS:
            text = safe_int(text)
        if text is not None:
            values[target] = text


def parse_character(text):
    """Parse one KANJIDIC2 character.

    Typed sub-elements are dispatched on their kind attribute; kinds without a
    counterpart in :class:`CharacterEntry` are ignored.  Numeric fields that do
    not parse are left absent.

    :param str text: The record text, ``<character>…</character>``.

    :return: The parsed character entry.

    :raises MalformedRecord: If the text is not a well-formed character or its
        literal is missing or longer than one character.

    """
    character = parse_xml(text, TAG)
    literal = element_text(character.find('literal'))
    if literal is None or len(literal) != 1:
        raise MalformedRecord('Literal %r is not a single character'
                              % (literal,), text)

    values = {}
    _dispatch(values, character.iterfind('codepoint/cp_value'), 'cp_type',
              CODEPOINTS)
    _dispatch(values, character.iterfind('radical/rad_value'), 'rad_type',
              RADICALS)
    _dispatch(values, character.iterfind('dic_number/dic_ref'), 'dr_type',
              DICTIONARY_REFERENCES)
    _dispatch(values, character.iterfind('query_code/q_code'), 'qc_type',
              QUERY_CODES)

    misc = character.find('misc')
    if misc is not None:
        values['grade'] = safe_int(element_text(misc.find('grade')))
        # Alternative stroke counts of miswritten forms follow the first one
        values['stroke_count'] = safe_int(element_text(misc.find('stroke_count')))
        values['frequency'] = safe_int(element_text(misc.find('freq')))
        values['jlpt_level'] = safe_int(element_text(misc.find('jlpt')))
        values['variants'] = [(variant.get('var_type'), element_text(variant))
                              for variant in misc.findall('variant')
                              if element_text(variant) is not None]

    on_readings = []
    kun_readings = []
    foreign_readings = {}
    meanings = {}
    for rmgroup in character.iterfind('reading_meaning/rmgroup'):
        for reading in rmgroup.iterfind('reading'):
            reading_text = element_text(reading)
            if reading_text is None:
                continue
            r_type = reading.get('r_type')
            if r_type in FOREIGN_READINGS:
                foreign_readings.setdefault(FOREIGN_READINGS[r_type],
                                            []).append(reading_text)
            elif r_type == 'ja_on':
                on_readings.append(reading_text)
            elif r_type == 'ja_kun':
                kun_readings.append(reading_text)
        for meaning in rmgroup.findall('meaning'):
            meaning_text = element_text(meaning)
            if meaning_text is not None:
                language = meaning.get('m_lang', DEFAULT_MEANING_LANGUAGE)
                meanings.setdefault(language, []).append(meaning_text)
    nanori = [nanori for reading_meaning in character.findall('reading_meaning')
              for nanori in texts(reading_meaning, 'nanori')]

    return CharacterEntry.create(literal,
                                 on_readings=on_readings,
                                 kun_readings=kun_readings,
                                 nanori=nanori,
                                 meanings=meanings,
                                 **foreign_readings,
                                 **values)
