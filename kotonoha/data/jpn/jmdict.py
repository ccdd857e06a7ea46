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


"""Parse JMdict ``<entry>`` records into :class:`LexiconEntry` records."""


import re

from . import XML_LANG, element_text, texts, unique, safe_int, parse_xml
from ..records import LexiconEntry, UsageExample, SourceLanguage
from ...errors import MalformedRecord
from ...features.vocabulary import (PartOfSpeech, Field, MiscInfo, Dialect,
                                    KanjiInfo, ReadingInfo, normalize)


TAG = 'entry'
"""Name of the record element in JMdict."""

DEFAULT_LANGUAGE = 'eng'
"""Language of glosses and source languages without an ``xml:lang``."""

_ENTITY_REFERENCE = re.compile(
    r'&(?!(?:amp|lt|gt|quot|apos|#[0-9]+|#x[0-9a-fA-F]+);)([^\s&;<>]+);')


def protect_entities(text):
    """Escape references to entities declared in the JMdict DTD.

    Record texts cut out of the document lack the DTD, so ``&n;`` would be an
    undefined entity.  Escaping it to ``&amp;n;`` keeps the reference as literal
    text, which the vocabulary mapper understands.  Predefined XML entities and
    character references are left alone.

    """
    return _ENTITY_REFERENCE.sub(r'&amp;\1;', text)


def parse_entry(text, gloss_languages=None):
    """Parse one JMdict entry.

    Written-form (``k_ele``), reading (``r_ele``) and sense groups are flattened
    into the attributes of a single :class:`LexiconEntry`.  Enumerated fields are
    normalized to canonical codes; unknown codes are dropped with a warning.

    :param str text: The record text, ``<entry>…</entry>``.

    :param gloss_languages: If not ``None``, a collection of ISO 639-2 codes;
        only glosses in these languages are kept.

    :return: The parsed entry.

    :raises MalformedRecord: If the text is not a well-formed entry, has no
        numeric sequence number, or has no reading.

    """
    entry = parse_xml(protect_entities(text), TAG)
    sequence_id = safe_int(element_text(entry.find('ent_seq')))
    if sequence_id is None:
        raise MalformedRecord('Missing or non-numeric ent_seq', text)
    context = 'entry %d' % (sequence_id,)

    kanji_forms = []
    kanji_info = []
    kanji_priority = []
    for k_ele in entry.findall('k_ele'):
        kanji_forms.extend(texts(k_ele, 'keb'))
        kanji_info.extend(normalize(KanjiInfo, texts(k_ele, 'ke_inf'),
                                    context=context))
        kanji_priority.extend(texts(k_ele, 'ke_pri'))

    readings = []
    reading_no_kanji = []
    reading_restrictions = []
    reading_info = []
    reading_priority = []
    for r_ele in entry.findall('r_ele'):
        reb = element_text(r_ele.find('reb'))
        if reb is None:
            continue
        readings.append(reb)
        if r_ele.find('re_nokanji') is not None:
            reading_no_kanji.append(reb)
        reading_restrictions.extend((reb, keb)
                                    for keb in texts(r_ele, 're_restr'))
        reading_info.extend(normalize(ReadingInfo, texts(r_ele, 're_inf'),
                                      context=context))
        reading_priority.extend(texts(r_ele, 're_pri'))
    if not readings:
        raise MalformedRecord('Entry %d has no reading' % (sequence_id,), text)

    pos = []
    cross_references = []
    antonyms = []
    fields = []
    misc = []
    sense_info = []
    source_languages = []
    dialects = []
    glosses = []
    examples = []
    for sense in entry.findall('sense'):
        pos.extend(normalize(PartOfSpeech, texts(sense, 'pos'),
                             context=context))
        cross_references.extend(texts(sense, 'xref'))
        antonyms.extend(texts(sense, 'ant'))
        fields.extend(normalize(Field, texts(sense, 'field'), context=context))
        misc.extend(normalize(MiscInfo, texts(sense, 'misc'), context=context))
        sense_info.extend(texts(sense, 's_inf'))
        dialects.extend(normalize(Dialect, texts(sense, 'dial'),
                                  context=context))
        for lsource in sense.findall('lsource'):
            source_languages.append(SourceLanguage(
                lsource.get(XML_LANG, DEFAULT_LANGUAGE),
                element_text(lsource),
                lsource.get('ls_wasei') == 'y'))
        for gloss in sense.findall('gloss'):
            if (gloss_languages is not None
                and gloss.get(XML_LANG, DEFAULT_LANGUAGE) not in gloss_languages):
                continue
            gloss = element_text(gloss)
            if gloss is not None:
                glosses.append(gloss)
        for example in sense.findall('example'):
            examples.append(UsageExample(
                element_text(example.find('ex_srce')) or '',
                element_text(example.find('ex_text')) or '',
                tuple(texts(example, 'ex_sent')) or None))

    return LexiconEntry.create(
        sequence_id,
        unique(readings),
        kanji_forms=unique(kanji_forms),
        kanji_info=unique(kanji_info),
        kanji_priority=unique(kanji_priority),
        reading_no_kanji=unique(reading_no_kanji),
        reading_restrictions=unique(reading_restrictions),
        reading_info=unique(reading_info),
        reading_priority=unique(reading_priority),
        pos=unique(pos),
        cross_references=unique(cross_references),
        antonyms=unique(antonyms),
        fields=unique(fields),
        misc=unique(misc),
        sense_info=sense_info,
        source_languages=source_languages,
        dialects=unique(dialects),
        glosses=glosses,
        examples=examples)
