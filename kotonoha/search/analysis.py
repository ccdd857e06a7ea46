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


"""Dictionary analysis of tokenized Japanese text.

A tokenizer is any callable ``tokenizer(text, mode)`` that returns a sequence
of :class:`Morpheme` values for ``text`` under the segmentation granularity
``mode`` (``'A'`` shortest units, ``'B'`` middle units, ``'C'`` named
entities).  The analysis looks up all surface forms, dictionary forms and
readings of the tokens with a single bulk aggregation and attaches the matching
lexicon entries and kanji characters to each token.

"""


import asyncio
import logging
from collections import namedtuple

from ..features.jpn import is_kanji, reading_variants, split_sentences


logger = logging.getLogger(__name__)


MODES = ('A', 'B', 'C')
"""Segmentation granularities, from shortest to longest units."""

EXAMPLE_SENTENCES = 5
"""Number of leading sentences of a batch that receive example sentences."""


Morpheme = namedtuple('Morpheme', ('surface', 'dictionary_form', 'reading',
                                   'pos'))
"""A token as produced by a tokenizer.  ``pos`` is a sequence of part-of-speech
labels, from the main category to the most specific one."""

TokenAnalysis = namedtuple('TokenAnalysis',
                           ('surface', 'dictionary_form', 'reading', 'pos',
                            'pos_detail', 'entries', 'character'))

SentenceAnalysis = namedtuple('SentenceAnalysis',
                              ('original', 'tokens', 'examples'))

TextAnalysis = namedtuple('TextAnalysis', ('original', 'sentences'))


def _tokenize(tokenizer, sentence, mode):
    if mode not in MODES:
        raise ValueError('Unknown segmentation mode %r' % (mode,))
    return [Morpheme(*morpheme) for morpheme in tokenizer(sentence, mode)]


def _terms(morpheme):
    return (morpheme.dictionary_form, morpheme.surface) + tuple(
        reading_variants(morpheme.reading) if morpheme.reading else ())


def _analyze_token(morpheme, results):
    """Join the lookup results of all terms of a token onto the token."""
    readings = reading_variants(morpheme.reading) if morpheme.reading else ()
    entries = {}
    for term in _terms(morpheme):
        for entry in results[term].entries:
            if entry.sequence_id in entries:
                continue
            written = entry.kanji_forms or ()
            if (morpheme.dictionary_form in written
                or morpheme.surface in written
                or any(reading in entry.readings for reading in readings)):
                entries[entry.sequence_id] = entry
    character = None
    if is_kanji(morpheme.surface):
        character = results[morpheme.surface].character
    pos = tuple(morpheme.pos or ())
    return TokenAnalysis(morpheme.surface, morpheme.dictionary_form,
                         morpheme.reading, pos[0] if pos else None, pos[1:],
                         tuple(entries.values()), character)


async def _lookup(engine, terms):
    terms = list(dict.fromkeys(terms))
    return dict(zip(terms, await engine.bulk_aggregated_search(terms)))


async def _no_examples():
    return ()


async def _examples(engine, sentence):
    return (await engine.aggregated_search(sentence)).examples


async def analyze_sentence(engine, tokenizer, sentence, mode='C',
                           find_examples=True):
    """Analyze a single sentence.

    :param kotonoha.search.aggregate.AggregationEngine engine: The engine to
        look up terms with.

    :param tokenizer: The tokenizer, see the module documentation.

    :param str sentence: The sentence to analyze.

    :param str mode: The segmentation granularity.

    :param bool find_examples: Whether to look up example sentences containing
        the whole sentence.

    :return: A :class:`SentenceAnalysis`.

    """
    morphemes = _tokenize(tokenizer, sentence, mode)
    results, examples = await asyncio.gather(
        _lookup(engine, [term for morpheme in morphemes
                         for term in _terms(morpheme)]),
        _examples(engine, sentence) if find_examples else _no_examples())
    return SentenceAnalysis(
        sentence,
        tuple(_analyze_token(morpheme, results) for morpheme in morphemes),
        tuple(examples))


async def analyze_text(engine, tokenizer, text, mode='C'):
    """Split a text into sentences and analyze each of them.

    Only the last sentence is given example sentences.

    :return: A :class:`TextAnalysis`.

    """
    sentences = split_sentences(text)
    analyses = await asyncio.gather(*(
        analyze_sentence(engine, tokenizer, sentence, mode,
                         find_examples=i == len(sentences) - 1)
        for i, sentence in enumerate(sentences)))
    return TextAnalysis(text, tuple(analyses))


async def analyze_sentence_batch(engine, tokenizer, sentences, mode='C'):
    """Analyze many sentences with a single bulk lookup.

    The first :data:`EXAMPLE_SENTENCES` sentences receive those examples among
    the lookup results that contain the whole sentence.

    :return: A list of :class:`SentenceAnalysis` values, one per sentence.

    """
    sentences = list(sentences)
    if not sentences:
        return []
    morphemes = [_tokenize(tokenizer, sentence, mode) for sentence in sentences]
    results = await _lookup(engine, [term for tokens in morphemes
                                     for morpheme in tokens
                                     for term in _terms(morpheme)])
    examples = {}
    for result in results.values():
        for example in result.examples:
            examples.setdefault(example.id, example)
    logger.debug('Analyzed %d sentences with %d distinct terms',
                 len(sentences), len(results))

    analyses = []
    for i, (sentence, tokens) in enumerate(zip(sentences, morphemes)):
        relevant = ()
        if i < EXAMPLE_SENTENCES:
            relevant = tuple(example for example in examples.values()
                             if sentence in example.text)
        analyses.append(SentenceAnalysis(
            sentence,
            tuple(_analyze_token(morpheme, results) for morpheme in tokens),
            relevant))
    return analyses
