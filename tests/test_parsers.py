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


import logging

import pytest

from kotonoha.data.extract import TagExtractor, extract_records
from kotonoha.data.jpn import safe_int
from kotonoha.data.jpn.jmdict import parse_entry, protect_entities
from kotonoha.data.jpn.kanjidic import parse_character
from kotonoha.data.jpn.tatoeba import parse_sentence_line
from kotonoha.data.records import (LexiconEntry, CharacterEntry,
                                   SourceLanguage, UsageExample)
from kotonoha.errors import MalformedRecord

from conftest import JMDICT, KANJIDIC


def records(document, tag):
    return list(extract_records([document], TagExtractor(tag)))


def assert_no_empty_lists(record):
    for name in record.LIST_FIELDS:
        value = getattr(record, name)
        assert value is None or len(value) > 0, name


class TestParseEntry:

    def test_flattens_element_groups(self):
        entry = parse_entry(records(JMDICT, 'entry')[0])
        assert entry.sequence_id == 1467640
        assert entry.kanji_forms == ('猫', '貓')
        assert entry.kanji_info == ('ateji',)
        assert entry.kanji_priority == ('ichi1', 'news1')
        assert entry.readings == ('ねこ', 'ネコ')
        assert entry.reading_no_kanji == ('ネコ',)
        assert entry.reading_priority == ('ichi1',)
        assert entry.pos == ('n',)
        assert entry.misc == ('uk',)
        assert entry.cross_references == ('芸者',)
        assert entry.glosses == ('cat', 'Katze', 'geisha')

    def test_absent_attributes_are_none(self):
        entry = parse_entry(records(JMDICT, 'entry')[1])
        assert entry.reading_info is None
        assert entry.dialects is None
        assert entry.examples is None
        for entry in map(parse_entry, records(JMDICT, 'entry')):
            assert_no_empty_lists(entry)

    def test_reading_restrictions_and_escaped_text(self):
        entry = parse_entry(records(JMDICT, 'entry')[2])
        assert entry.kanji_forms is None
        assert entry.reading_restrictions == (('ねこねこ', '猫々'),)
        assert entry.glosses == ('kitties & cats',)

    def test_gloss_languages(self):
        text = records(JMDICT, 'entry')[0]
        assert parse_entry(text, gloss_languages={'ger'}).glosses == ('Katze',)
        assert parse_entry(text, gloss_languages={'eng'}).glosses \
            == ('cat', 'geisha')
        assert parse_entry(text, gloss_languages={'fre'}).glosses is None

    def test_source_languages_and_examples(self):
        entry = parse_entry('''<entry><ent_seq>1049180</ent_seq>
            <r_ele><reb>アルバイト</reb></r_ele>
            <sense><pos>&n;</pos><lsource xml:lang="ger">Arbeit</lsource>
            <lsource ls_wasei="y"/><dial>&ksb;</dial>
            <gloss>part-time job</gloss>
            <example><ex_srce exsrc_type="tat">100</ex_srce>
            <ex_text>アルバイト</ex_text>
            <ex_sent xml:lang="jpn">アルバイトをする。</ex_sent>
            <ex_sent xml:lang="eng">I work part-time.</ex_sent></example>
            </sense></entry>''')
        assert entry.source_languages == (SourceLanguage('ger', 'Arbeit', False),
                                          SourceLanguage('eng', None, True))
        assert entry.dialects == ('ksb',)
        assert entry.examples == (UsageExample(
            '100', 'アルバイト', ('アルバイトをする。', 'I work part-time.')),)

    def test_unknown_vocabulary_is_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger='kotonoha'):
            entry = parse_entry('<entry><ent_seq>1</ent_seq>'
                                '<r_ele><reb>あ</reb></r_ele>'
                                '<sense><pos>&n;</pos><pos>&bogus;</pos>'
                                '</sense></entry>')
        assert entry.pos == ('n',)
        assert "Unknown PartOfSpeech value '&bogus;' in entry 1" in caplog.text

    def test_entity_expansions_are_resolved(self):
        entry = parse_entry('<entry><ent_seq>2</ent_seq>'
                            '<r_ele><reb>あ</reb></r_ele>'
                            '<sense><pos>noun (common) (futsuumeishi)</pos>'
                            '<misc>word usually written using kana alone</misc>'
                            '</sense></entry>')
        assert entry.pos == ('n',)
        assert entry.misc == ('uk',)

    @pytest.mark.parametrize('text', [
        '<entry><r_ele><reb>あ</reb></r_ele></entry>',
        '<entry><ent_seq>x</ent_seq><r_ele><reb>あ</reb></r_ele></entry>',
        '<entry><ent_seq>3</ent_seq><k_ele><keb>亜</keb></k_ele></entry>',
        '<entry><ent_seq>3</ent_seq><r_ele><reb>あ</reb>',
        '<character><literal>亜</literal></character>'])
    def test_malformed(self, text):
        with pytest.raises(MalformedRecord):
            parse_entry(text)

    def test_protect_entities(self):
        assert protect_entities('&n; &amp; &lt; &#x732b; &#29483; &adj-i;') \
            == '&amp;n; &amp; &lt; &#x732b; &#29483; &amp;adj-i;'


class TestParseCharacter:

    def test_dispatches_typed_elements(self):
        character = parse_character(records(KANJIDIC, 'character')[0])
        assert character.literal == '猫'
        assert character.unicode == '732b'
        assert character.jis_code == '1-39-13'
        assert character.classical_radical == 94
        assert character.nelson_radical == 94
        assert character.grade == 8
        assert character.stroke_count == 11
        assert character.frequency == 1702
        assert character.jlpt_level == 2
        assert character.nelson_classic == 2891
        assert character.heisig == 244
        assert character.nelson_new is None
        assert character.skip_code == '1-3-8'
        assert character.four_corner == '4426.0'
        assert character.deroo is None
        assert character.pinyin == ('mao1',)
        assert character.korean_r == ('myo',)
        assert character.korean_h == ('묘',)
        assert character.vietnamese == ('Miêu',)
        assert character.on_readings == ('ビョウ',)
        assert character.kun_readings == ('ねこ',)
        assert character.nanori == ('ね',)
        assert character.meanings == {'en': ('cat',), 'fr': ('chat',)}
        assert character.variants == (('jis212', '1-34-21'),)

    def test_absent_attributes_are_none(self):
        character = parse_character(records(KANJIDIC, 'character')[1])
        assert character.jis_code is None
        assert character.pinyin is None
        assert character.nanori is None
        assert character.variants is None
        assert_no_empty_lists(character)

    def test_keeps_every_foreign_reading(self):
        character = parse_character(
            '<character><literal>行</literal><reading_meaning><rmgroup>'
            '<reading r_type="pinyin">xing2</reading>'
            '<reading r_type="pinyin">hang2</reading>'
            '<reading r_type="korean_h">행</reading>'
            '<reading r_type="korean_h">항</reading>'
            '<reading r_type="ja_on">コウ</reading>'
            '</rmgroup></reading_meaning></character>')
        assert character.pinyin == ('xing2', 'hang2')
        assert character.korean_h == ('행', '항')
        assert character.korean_r is None
        assert character.on_readings == ('コウ',)

    def test_unparsable_numbers_are_absent(self):
        character = parse_character(
            '<character><literal>亜</literal>'
            '<radical><rad_value rad_type="classical">x</rad_value></radical>'
            '<misc><grade></grade><stroke_count>7</stroke_count></misc>'
            '</character>')
        assert character.classical_radical is None
        assert character.grade is None
        assert character.stroke_count == 7
        assert character.meanings is None

    @pytest.mark.parametrize('text', [
        '<character></character>',
        '<character><literal>亜亜</literal></character>',
        '<character><literal>亜</literal>'])
    def test_malformed(self, text):
        with pytest.raises(MalformedRecord):
            parse_character(text)


class TestParseSentenceLine:

    def test_three_fields(self):
        sentence = parse_sentence_line('4705\tjpn\t猫が好きです。')
        assert (sentence.id, sentence.language, sentence.text) \
            == (4705, 'jpn', '猫が好きです。')
        assert sentence.created_at is None

    def test_extra_columns_are_ignored(self):
        assert parse_sentence_line('1\teng\tHi.\textra').text == 'Hi.'

    @pytest.mark.parametrize('line', ['1\tjpn', '1\tjpn\t', '\tjpn\tあ',
                                      'x\tjpn\tあ'])
    def test_malformed(self, line):
        with pytest.raises(MalformedRecord):
            parse_sentence_line(line)


class TestRecords:

    def test_create_compacts_lists(self):
        entry = LexiconEntry.create(1, ['あ'], kanji_forms=[], glosses=['a'])
        assert entry.kanji_forms is None
        assert entry.glosses == ('a',)
        assert entry.matches('a') and entry.matches('あ')
        assert not entry.matches('b')

    def test_entry_requires_reading(self):
        with pytest.raises(ValueError):
            LexiconEntry.create(1, [])

    def test_character_meanings_are_compacted(self):
        character = CharacterEntry.create('亜', meanings={'en': [], 'fr': []})
        assert character.meanings is None

    def test_safe_int(self):
        assert safe_int(' 12 ') == 12
        assert safe_int('1.5') is None
        assert safe_int(None) is None
