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


"""Reload the corpora into the persistent store.

A reload clears the table of a corpus and refills it in batches.  Records flow
from the chunk reader through the extractor and the parser into a bounded
:class:`~kotonoha.util.concurrency.BackpressureChannel`; the consumer collects
them into batches and pauses the channel while a batch is being flushed, so
that reading and parsing stop until the store has caught up.

Reloads are not transactional: a failed reload leaves its table partially
populated, and :meth:`DataLoader.load_all` does not roll back corpora that were
reloaded before a failure.

"""


import asyncio
import logging
import functools
from collections import namedtuple

from .extract import TagExtractor, LineExtractor, extract_records, read_chunks
from .jpn import jmdict, kanjidic, tatoeba
from .store import LexiconRepository, CharacterRepository, SentenceRepository
from ..errors import MalformedRecord, StoreWriteFailure
from ..util.concurrency import BackpressureChannel


logger = logging.getLogger(__name__)


Corpus = namedtuple('Corpus', ('name', 'extractor_factory', 'parser',
                               'repository_attr'))
"""Everything needed to reload one corpus: how to cut its records out of the
input, how to parse one record, and which repository of a
:class:`DataLoader` receives the records."""

JMDICT = Corpus('jmdict', functools.partial(TagExtractor, jmdict.TAG),
                jmdict.parse_entry, 'lexicon')
KANJIDIC = Corpus('kanjidic', functools.partial(TagExtractor, kanjidic.TAG),
                  kanjidic.parse_character, 'characters')
TATOEBA = Corpus('tatoeba', LineExtractor, tatoeba.parse_sentence_line,
                 'sentences')

CORPORA = {corpus.name: corpus for corpus in (JMDICT, KANJIDIC, TATOEBA)}


async def load_corpus(corpus, chunks, repository, batch_size=1000,
                      on_progress=None):
    """Replace the contents of ``repository`` with the records in ``chunks``.

    Malformed records are logged and skipped.

    :param Corpus corpus: The corpus the chunks belong to.

    :param chunks: An iterable of ``bytes`` chunks of the input.

    :param repository: The repository to clear and fill.  Must provide the
        coroutines ``clear()`` and ``insert_batch(batch)``.

    :param int batch_size: The number of records per flush.

    :param on_progress: If given, called with the total number of committed
        records after every flush.

    :return: The number of committed records.

    :raises StoreWriteFailure: If flushing a batch fails.  The records of
        earlier batches stay committed.

    """
    if batch_size < 1:
        raise ValueError('Unable to flush batches of %r records' % (batch_size,))
    await repository.clear()

    channel = BackpressureChannel(batch_size)
    skipped = 0

    async def produce():
        nonlocal skipped
        try:
            for text in extract_records(chunks, corpus.extractor_factory()):
                try:
                    record = corpus.parser(text)
                except MalformedRecord as error:
                    skipped += 1
                    logger.warning('Skipping %s record: %s', corpus.name, error)
                    continue
                await channel.put(record)
        except Exception:
            channel.abort()
            raise
        await channel.close()

    committed = 0
    batch = []

    async def flush():
        nonlocal committed, batch
        records = tuple(batch)
        batch = []
        async with channel.suspended():
            try:
                await repository.insert_batch(records)
            except Exception as error:
                raise StoreWriteFailure(corpus.name, committed, error) from error
        committed += len(records)
        logger.debug('Committed %d %s records', committed, corpus.name)
        if on_progress is not None:
            on_progress(committed)

    producer = asyncio.ensure_future(produce())
    try:
        async for record in channel:
            batch.append(record)
            if len(batch) >= batch_size:
                await flush()
        await producer
        if batch:
            await flush()
    except BaseException:
        producer.cancel()
        await asyncio.gather(producer, return_exceptions=True)
        raise
    logger.info('Loaded %d %s records, skipped %d malformed',
                committed, corpus.name, skipped)
    return committed


class MirroredRepository:
    """Feeds the records of a reload into a repository and its mirrors.

    Lookups are not forwarded; query the repositories directly.

    """

    def __init__(self, primary, *mirrors):
        self.repositories = (primary,) + mirrors


    async def clear(self):
        for repository in self.repositories:
            await repository.clear()


    async def insert_batch(self, batch):
        for repository in self.repositories:
            await repository.insert_batch(batch)


def _tracked(chunks, on_read):
    total = 0
    for chunk in chunks:
        total += len(chunk)
        on_read(total)
        yield chunk


class DataLoader:
    """Reloads the configured corpora into a database.

    :param kotonoha.config.Settings settings: Which corpora to reload, from
        which files, and in which batch size.

    :param kotonoha.data.store.Database database: The open target database.

    :param sentence_index: An optional
        :class:`~kotonoha.data.search_index.ElasticsearchSentenceIndex` that
        mirrors the sentence table.

    """

    def __init__(self, settings, database, sentence_index=None):
        self.settings = settings
        self.database = database
        self.sentence_index = sentence_index
        self.lexicon = LexiconRepository(database)
        self.characters = CharacterRepository(database)
        self.sentences = SentenceRepository(database)


    def repository(self, corpus):
        repository = getattr(self, corpus.repository_attr)
        if corpus is TATOEBA and self.sentence_index is not None:
            return MirroredRepository(repository, self.sentence_index)
        return repository


    async def load(self, corpus, path=None, on_progress=None, on_read=None):
        """Reload one corpus.

        :param Corpus corpus: The corpus to reload.

        :param path: The input file.  If ``None``, the configured file is
            read, provided that reloading the corpus is enabled.

        :param on_progress: Called with the number of committed records after
            every flush.

        :param on_read: Called with the total number of bytes read after every
            chunk.

        :return: The number of committed records, or ``None`` if reloading the
            corpus is disabled.

        :raises ConfigurationMissing: If reloading is enabled but no input file
            is configured.

        """
        if path is None:
            if not self.settings.enabled(corpus.name):
                logger.info('Reloading %s is disabled, skipped', corpus.name)
                return None
            path = self.settings.require_path(corpus.name)
        if corpus is JMDICT and self.settings.gloss_languages is not None:
            corpus = corpus._replace(parser=functools.partial(
                jmdict.parse_entry,
                gloss_languages=self.settings.gloss_languages))
        logger.info('Reloading %s from %s', corpus.name, path)
        chunks = read_chunks(path)
        if on_read is not None:
            chunks = _tracked(chunks, on_read)
        return await load_corpus(corpus, chunks, self.repository(corpus),
                                 self.settings.batch_size, on_progress)


    async def load_jmdict(self, path=None, **callbacks):
        return await self.load(JMDICT, path, **callbacks)


    async def load_kanjidic(self, path=None, **callbacks):
        return await self.load(KANJIDIC, path, **callbacks)


    async def load_tatoeba(self, path=None, **callbacks):
        return await self.load(TATOEBA, path, **callbacks)


    async def load_all(self):
        """Reload every enabled corpus, one after another.

        :return: A dictionary from corpus names to the numbers of committed
            records (``None`` for disabled corpora).

        """
        return {corpus.name: await self.load(corpus)
                for corpus in (JMDICT, KANJIDIC, TATOEBA)}
