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


"""Character classes and light-weight text helpers for Japanese."""


import re


IDEOGRAPHIC_RANGES = ((0x2e80, 0x2ef3), # CJK radicals supplement
                      (0x2f00, 0x2fd5), # Kanxi radicals
                      (0x3400, 0x4dbf), # CJK unified ideographs extension A
                      (0x4e00, 0x9fff), # CJK unified ideographs
                      (0xf900, 0xfaff), # CJK compatibility ideographs
                      (0x20000, 0x2a6df), # CJK unified ideographs extension B
                      (0x2a700, 0x2b73f), # CJK unified ideographs extension C
                      (0x2b740, 0x2b81f), # CJK unified ideographs extension D
                      (0x2b820, 0x2ceaf), # CJK unified ideographs extension E
                      (0x2ceb0, 0x2ebef), # CJK unified ideographs extension F
                      (0x2f800, 0x2fa1f)) # CJK compatibility ideographs supplement
# Radical blocks are not characters of their own in KANJIDIC2
KANJI_RANGES = IDEOGRAPHIC_RANGES[2:]

SENTENCE_END_PUNCTUATION = '。！？!?'

_SENTENCE_PATTERN = re.compile('.*?[%s]+' % (re.escape(SENTENCE_END_PUNCTUATION),))
_LINE_BREAKS = re.compile('[\r\n\t]+')


def in_ranges(char, ranges):
    """Determines whether the given character is in one of the ranges."""
    return any(start <= char and char <= stop for start, stop in ranges)


def is_kanji(phrase: str) -> bool:
    """Determine whether the specified phrase is a single kanji character.

    :param str phrase: The phrase to test.

    :return: ``True`` if ``phrase`` consists of exactly one character from the
        CJK unified or compatibility ideograph blocks, ``False`` otherwise.

    """
    return len(phrase) == 1 and in_ranges(ord(phrase), KANJI_RANGES)


def hiragana_to_katakana(phrase: str) -> str:
    """Convert hiragana to katakana.

    Do not handle the use of prolonged sound marks.

    :param str phrase: The phrase in which to replace all hiragana characters by
        katakana characters.

    """
    return ''.join(
        [chr(i + 0x60
             if (i >= 0x3041 and i <= 0x3096) or i == 0x309d or i == 0x309e
             else i)
         for i in [ord(c) for c in phrase]])


def katakana_to_hiragana(phrase: str) -> str:
    """Convert katakana to hiragana, the inverse of
    :func:`hiragana_to_katakana`.

    Katakana without a hiragana counterpart (e.g. ヷ) are kept.

    """
    return ''.join(
        [chr(i - 0x60
             if (i >= 0x30a1 and i <= 0x30f6) or i == 0x30fd or i == 0x30fe
             else i)
         for i in [ord(c) for c in phrase]])


def reading_variants(reading):
    """Return the distinct spellings of a reading in its given script, in
    hiragana and in katakana, in that order."""
    variants = []
    for variant in (reading, katakana_to_hiragana(reading),
                    hiragana_to_katakana(reading)):
        if variant not in variants:
            variants.append(variant)
    return tuple(variants)


def split_sentences(text):
    """Split a text into sentences at sentence-final punctuation.

    Line breaks and tabs are folded into single spaces first.  Text after the
    last sentence-final punctuation mark forms a sentence of its own unless it
    is blank.

    :param str text: The text to split.

    :return: A list of sentences, including their final punctuation.  Empty
        for blank or non-string input.

    """
    if not text or not isinstance(text, str):
        return []
    text = _LINE_BREAKS.sub(' ', text)
    sentences = []
    last_index = 0
    for match in _SENTENCE_PATTERN.finditer(text):
        sentences.append(match.group(0))
        last_index = match.end()
    if last_index < len(text) and text[last_index:].strip():
        sentences.append(text[last_index:])
    return sentences
