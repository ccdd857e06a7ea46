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


import asyncio
from unittest import mock

import pytest
from elasticsearch.helpers import BulkIndexError

from kotonoha.data.records import ExampleSentence
from kotonoha.data.search_index import (ElasticsearchSentenceIndex,
                                        INDEX_MAPPING)


SENTENCES = [ExampleSentence(4705, 'jpn', '猫が好きです。'),
             ExampleSentence(4706, 'eng', 'I like cats.')]


def hit(sentence):
    return {'_source': {'id': sentence.id, 'language': sentence.language,
                        'text': sentence.text,
                        'created_at': '2024-01-01T00:00:00+00:00',
                        'updated_at': '2024-01-01T00:00:00+00:00'}}


class TestElasticsearchSentenceIndex:

    def test_clear_recreates_index(self):
        es = mock.MagicMock()
        es.indices.exists.return_value = True
        asyncio.run(ElasticsearchSentenceIndex(es, 'sentences').clear())
        es.indices.delete.assert_called_once_with(index='sentences')
        es.indices.create.assert_called_once_with(index='sentences',
                                                  mappings=INDEX_MAPPING)

    def test_clear_creates_missing_index(self):
        es = mock.MagicMock()
        es.indices.exists.return_value = False
        asyncio.run(ElasticsearchSentenceIndex(es).clear())
        es.indices.delete.assert_not_called()
        es.indices.create.assert_called_once()

    def test_insert_batch_bulk_indexes(self):
        es = mock.MagicMock()
        index = ElasticsearchSentenceIndex(es, 'sentences')
        with mock.patch('kotonoha.data.search_index.helpers.bulk',
                        return_value=(2, [])) as bulk:
            assert asyncio.run(index.insert_batch(SENTENCES)) == 2
        (client, actions), kwargs = bulk.call_args
        assert client is es
        assert kwargs == {'raise_on_error': False}
        actions = list(actions)
        assert [action['_id'] for action in actions] == [4705, 4706]
        assert actions[0]['_index'] == 'sentences'
        assert actions[0]['_source']['text'] == '猫が好きです。'

    def test_empty_batch(self):
        index = ElasticsearchSentenceIndex(mock.MagicMock())
        with mock.patch('kotonoha.data.search_index.helpers.bulk') as bulk:
            assert asyncio.run(index.insert_batch([])) == 0
        bulk.assert_not_called()

    def test_search_text(self):
        es = mock.MagicMock()
        es.search.return_value = {'hits': {'hits': [hit(SENTENCES[0])]}}
        index = ElasticsearchSentenceIndex(es, 'sentences')
        found = asyncio.run(index.search_text(['猫', '好き', '猫'], limit=5,
                                              language='jpn'))
        assert [sentence.id for sentence in found] == [4705]
        assert found[0].created_at.year == 2024
        kwargs = es.search.call_args.kwargs
        assert kwargs['index'] == 'sentences'
        assert kwargs['size'] == 10
        assert kwargs['query']['bool']['should'] \
            == [{'match_phrase': {'text': '猫'}},
                {'match_phrase': {'text': '好き'}}]
        assert kwargs['query']['bool']['filter'] \
            == [{'term': {'language': 'jpn'}}]

    def test_search_without_terms(self):
        es = mock.MagicMock()
        assert asyncio.run(ElasticsearchSentenceIndex(es).search_text([])) == []
        es.search.assert_not_called()

    def test_failed_documents_fail_the_batch(self, caplog):
        index = ElasticsearchSentenceIndex(mock.MagicMock(), 'sentences')
        failure = {'index': {'_id': 4706, 'status': 429}}
        with mock.patch('kotonoha.data.search_index.helpers.bulk',
                        return_value=(1, [failure])):
            with pytest.raises(BulkIndexError) as info:
                asyncio.run(index.insert_batch(SENTENCES))
        assert info.value.errors == [failure]
        assert 'Failed to index 1 of 2 sentences' in caplog.text
