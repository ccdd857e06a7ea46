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


"""Cross-corpus lookups.

A query term is looked up in all three corpora at once: as a kanji character,
among the written forms, readings and glosses of the lexicon, and in the text
of the example sentences.

"""


import asyncio
import logging
from collections import namedtuple


logger = logging.getLogger(__name__)


AggregatedResult = namedtuple('AggregatedResult',
                              ('query', 'character', 'entries', 'examples'))
"""The result of looking up one term.

``character`` is the :class:`~kotonoha.data.records.CharacterEntry` of a
single-character term (``None`` for longer terms or unknown characters),
``entries`` and ``examples`` are tuples of matching lexicon entries and example
sentences.

"""


async def _constant(value):
    return value


class AggregationEngine:
    """Looks up terms across the character, lexicon and sentence stores.

    :param characters: A repository with ``find_by_literal`` and
        ``find_by_literals`` coroutines.

    :param lexicon: A repository with ``find_by_term`` and ``find_by_terms``
        coroutines.

    :param sentences: A repository with a ``search_text`` coroutine, e.g. the
        sentence table or its Elasticsearch mirror.

    :param int limit: The maximum number of entries and of examples per term.

    """

    def __init__(self, characters, lexicon, sentences, limit=20):
        if limit < 1:
            raise ValueError('Unable to cap results at %r' % (limit,))
        self.characters = characters
        self.lexicon = lexicon
        self.sentences = sentences
        self.limit = limit


    async def aggregated_search(self, term):
        """Look up a single term in all corpora concurrently.

        The character store is only queried for single-character terms.

        :param str term: The term to look up.

        :return: An :class:`AggregatedResult`.

        """
        character, entries, examples = await asyncio.gather(
            self.characters.find_by_literal(term) if len(term) == 1
            else _constant(None),
            self.lexicon.find_by_term(term, self.limit),
            self.sentences.search_text([term], self.limit))
        return AggregatedResult(term, character, tuple(entries[:self.limit]),
                                tuple(examples[:self.limit]))


    async def bulk_aggregated_search(self, terms):
        """Look up many terms with one query per corpus.

        The distinct terms are looked up together; the results are then
        attributed to the terms they match.  Repeated terms share their result.

        :param terms: A sequence of terms.

        :return: A list with one :class:`AggregatedResult` per element of
            ``terms``, in the same order.

        """
        terms = list(terms)
        if not terms:
            return []
        distinct = list(dict.fromkeys(terms))
        literals = [term for term in distinct if len(term) == 1]
        characters, entries, examples = await asyncio.gather(
            self.characters.find_by_literals(literals) if literals
            else _constant([]),
            self.lexicon.find_by_terms(distinct),
            self.sentences.search_text(distinct, self.limit))
        logger.debug('Looked up %d distinct terms: %d characters, %d entries, '
                     '%d examples', len(distinct), len(characters),
                     len(entries), len(examples))

        characters = {character.literal: character for character in characters}
        results = {}
        for term in distinct:
            results[term] = AggregatedResult(
                term,
                characters.get(term) if len(term) == 1 else None,
                tuple([entry for entry in entries
                       if entry.matches(term)][:self.limit]),
                tuple([sentence for sentence in examples
                       if term in sentence.text][:self.limit]))
        return [results[term] for term in terms]
