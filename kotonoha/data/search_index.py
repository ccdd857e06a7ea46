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


"""Elasticsearch mirror of the sentence corpus.

When an Elasticsearch host is configured, sentence reloads also feed this
index and full-text sentence lookups are answered by it.  The client is
synchronous; its calls run on the default executor of the event loop.

"""


import asyncio
import logging
import functools
from datetime import datetime, timezone

from elasticsearch import Elasticsearch, helpers

from .records import ExampleSentence


logger = logging.getLogger(__name__)


INDEX_NAME = 'kotonoha_sentences'

INDEX_MAPPING = {
    'properties': {
        'id': {'type': 'long'},
        'language': {'type': 'keyword'},
        'text': {'type': 'text'},
        'created_at': {'type': 'date'},
        'updated_at': {'type': 'date'}}}


class ElasticsearchSentenceIndex:
    """Sentence repository backed by an Elasticsearch index.

    :param es: An :class:`elasticsearch.Elasticsearch` client.

    :param str index: The name of the index.

    """

    def __init__(self, es, index=INDEX_NAME):
        self.es = es
        self.index = index


    @classmethod
    def connect(cls, host, index=INDEX_NAME):
        return cls(Elasticsearch(host), index)


    async def _run(self, fn, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None,
                                          functools.partial(fn, *args, **kwargs))


    def _recreate(self):
        if self.es.indices.exists(index=self.index):
            self.es.indices.delete(index=self.index)
        self.es.indices.create(index=self.index, mappings=INDEX_MAPPING)


    async def clear(self):
        """Drop and recreate the index."""
        await self._run(self._recreate)
        logger.warning('Cleared index %s', self.index)


    def _actions(self, batch):
        now = datetime.now(timezone.utc).isoformat()
        for sentence in batch:
            yield {'_index': self.index,
                   '_id': sentence.id,
                   '_source': {'id': sentence.id,
                               'language': sentence.language,
                               'text': sentence.text,
                               'created_at': now,
                               'updated_at': now}}


    async def insert_batch(self, batch):
        """Index a batch of sentences.

        :return: The number of indexed sentences.

        :raises elasticsearch.helpers.BulkIndexError: If any sentence of the
            batch failed to index.

        """
        if not batch:
            return 0
        success, errors = await self._run(helpers.bulk, self.es,
                                          self._actions(batch),
                                          raise_on_error=False)
        if errors:
            logger.error('Failed to index %d of %d sentences: %s',
                         len(errors), len(batch), errors)
            raise helpers.BulkIndexError(
                '%d document(s) failed to index.' % (len(errors),), errors)
        return success


    async def search_text(self, terms, limit=20, language=None):
        """Find the sentences containing any of ``terms`` as a phrase.

        At most ``limit`` sentences per term are returned in total, ordered by
        relevance.

        """
        if isinstance(terms, str):
            terms = [terms]
        terms = list(dict.fromkeys(term for term in terms if term))
        if not terms:
            return []
        query = {'bool': {'should': [{'match_phrase': {'text': term}}
                                     for term in terms],
                          'minimum_should_match': 1}}
        if language is not None:
            query['bool']['filter'] = [{'term': {'language': language}}]
        response = await self._run(self.es.search, index=self.index,
                                   query=query, size=limit * len(terms))
        return [_sentence(hit['_source'])
                for hit in response['hits']['hits']]


def _timestamp(value):
    return None if value is None else datetime.fromisoformat(value)


def _sentence(source):
    return ExampleSentence(source['id'], source['language'], source['text'],
                           _timestamp(source.get('created_at')),
                           _timestamp(source.get('updated_at')))
