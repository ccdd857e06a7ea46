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


"""Persistent SQLite store of the three corpora.

One table holds the records of each corpus; list-valued attributes are stored
as JSON text (see :mod:`kotonoha.util.persistence`).  Lexicon entries are
additionally indexed by their written forms, readings and glosses in the
``lexicon_terms`` table, and sentence texts by an FTS5 trigram index where the
SQLite build supports one.

All statements run on the single worker thread of a :class:`Database`, which
owns the connection.  Repository methods are coroutines that schedule their
statements on that thread.

"""


import re
import asyncio
import logging
import functools
import sqlite3 as sql
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from .records import (LexiconEntry, CharacterEntry, ExampleSentence,
                      SourceLanguage, UsageExample)
from ..util.persistence import to_column, from_column


logger = logging.getLogger(__name__)


IN_MEMORY = ':memory:'

MAX_TERMS_PER_STATEMENT = 400
"""Maximum number of terms bound in a single statement; larger lookups are
split.  Stays below SQLite's limits on variables and compound selects."""

TRIGRAM_LENGTH = 3
"""Minimum number of literal characters a term needs for the trigram index to
find it.  Shorter terms are matched by scanning the sentence table."""


SentencePage = namedtuple('SentencePage', ('sentences', 'total'))
"""One page of sentence search results and the number of all matches."""


_CHARACTER_INTEGERS = {'classical_radical', 'nelson_radical', 'grade',
                       'stroke_count', 'frequency', 'jlpt_level',
                       'nelson_classic', 'nelson_new', 'njecd',
                       'kanji_learners', 'heisig'}

_CHARACTER_JSON = set(CharacterEntry.LIST_FIELDS) | {'meanings'}


def _schema():
    lexicon_columns = ',\n'.join('%s TEXT' % (name,)
                                 for name in LexiconEntry.LIST_FIELDS)
    character_columns = ',\n'.join(
        '%s %s' % (name, 'INTEGER' if name in _CHARACTER_INTEGERS else 'TEXT')
        for name in CharacterEntry._fields[1:])
    return ('''CREATE TABLE IF NOT EXISTS lexicon_entries (
                   sequence_id INTEGER PRIMARY KEY,
                   %s)''' % (lexicon_columns,),
            '''CREATE TABLE IF NOT EXISTS lexicon_terms (
                   term TEXT NOT NULL,
                   kind TEXT NOT NULL,
                   sequence_id INTEGER NOT NULL)''',
            '''CREATE INDEX IF NOT EXISTS lexicon_terms_term_idx
                   ON lexicon_terms (term)''',
            '''CREATE INDEX IF NOT EXISTS lexicon_terms_sequence_id_idx
                   ON lexicon_terms (sequence_id)''',
            '''CREATE TABLE IF NOT EXISTS kanji_characters (
                   literal TEXT PRIMARY KEY,
                   %s)''' % (character_columns,),
            '''CREATE TABLE IF NOT EXISTS sentences (
                   id INTEGER PRIMARY KEY,
                   language TEXT NOT NULL,
                   text TEXT NOT NULL,
                   created_at TEXT NOT NULL,
                   updated_at TEXT NOT NULL)''',
            '''CREATE INDEX IF NOT EXISTS sentences_language_idx
                   ON sentences (language)''')


def _casefold(text):
    return None if text is None else text.casefold()


def _connect(path):
    conn = sql.connect(path)
    conn.create_function('casefold', 1, _casefold, deterministic=True)
    c = conn.cursor()
    c.execute('PRAGMA encoding="UTF-8"')
    for statement in _schema():
        c.execute(statement)
    try:
        c.execute('''CREATE VIRTUAL TABLE IF NOT EXISTS sentences_fts
                         USING fts5(text, tokenize='trigram case_sensitive 1')''')
        full_text = True
    except sql.OperationalError as error:
        logger.warning('No full-text index for sentences (%s), '
                       'falling back to substring scans', error)
        full_text = False
    conn.commit()
    return conn, full_text


def _chunks(values, size=MAX_TERMS_PER_STATEMENT):
    for i in range(0, len(values), size):
        yield values[i:i + size]


def glob_pattern(term):
    """Build a GLOB pattern matching texts that contain ``term`` verbatim."""
    return '*%s*' % (re.sub(r'([*?\[])', r'[\1]', term),)


def _now():
    return datetime.now(timezone.utc).isoformat()


class Database:
    """An SQLite database accessed from a dedicated worker thread.

    Use as an asynchronous context manager::

        async with Database('data/processed/kotonoha.db') as database:
            lexicon = LexiconRepository(database)
            ...

    :param path: The database file.  Missing parent directories are created.
        ``':memory:'`` opens a transient database.

    """

    def __init__(self, path):
        self.path = str(path)
        self.full_text = False
        self._conn = None
        self._executor = None


    async def open(self):
        if self._executor is not None:
            raise RuntimeError('Database %r is already open' % (self.path,))
        if self.path != IN_MEMORY:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self._executor = ThreadPoolExecutor(max_workers=1,
                                            thread_name_prefix='kotonoha-store')
        loop = asyncio.get_running_loop()
        self._conn, self.full_text = await loop.run_in_executor(
            self._executor, _connect, self.path)
        logger.debug('Opened database %r', self.path)
        return self


    async def close(self):
        if self._executor is None:
            return
        try:
            await self.run(lambda conn: conn.close())
        finally:
            self._executor.shutdown(wait=True)
            self._executor = None
            self._conn = None


    async def __aenter__(self):
        return await self.open()


    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


    async def run(self, fn, *args):
        """Run ``fn(conn, *args)`` on the worker thread and return its result.

        :raises RuntimeError: If the database is not open.

        """
        if self._executor is None:
            raise RuntimeError('Database %r is not open' % (self.path,))
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, functools.partial(fn, self._conn, *args))


class _Repository:
    """Access to the table of one corpus."""

    table = None


    def __init__(self, database):
        self.database = database


    async def clear(self):
        """Delete all records of the corpus."""
        await self.database.run(self._clear)
        logger.warning('Cleared table %s', self.table)


    async def insert_batch(self, batch):
        """Insert or replace a batch of records in one transaction."""
        if batch:
            await self.database.run(self._insert, tuple(batch))


    async def count(self):
        def count(conn):
            return conn.execute('SELECT COUNT(*) FROM %s'
                                % (self.table,)).fetchone()[0]
        return await self.database.run(count)


    def _clear(self, conn):
        with conn:
            conn.execute('DELETE FROM %s' % (self.table,))


    def _insert(self, conn, batch):
        raise NotImplementedError()


class LexiconRepository(_Repository):
    """Lexicon entries, looked up by written form, reading or gloss."""

    table = 'lexicon_entries'

    TERM_KINDS = (('kanji', 'kanji_forms'), ('reading', 'readings'),
                  ('gloss', 'glosses'))


    def _clear(self, conn):
        with conn:
            conn.execute('DELETE FROM lexicon_terms')
            conn.execute('DELETE FROM lexicon_entries')


    def _insert(self, conn, batch):
        columns = ('sequence_id',) + LexiconEntry.LIST_FIELDS
        statement = ('INSERT OR REPLACE INTO lexicon_entries (%s) VALUES (%s)'
                     % (', '.join(columns), ', '.join('?' * len(columns))))
        with conn:
            conn.executemany(
                'DELETE FROM lexicon_terms WHERE sequence_id = ?',
                ((entry.sequence_id,) for entry in batch))
            conn.executemany(
                statement,
                ((entry.sequence_id,)
                 + tuple(to_column(getattr(entry, name))
                         for name in LexiconEntry.LIST_FIELDS)
                 for entry in batch))
            conn.executemany(
                'INSERT INTO lexicon_terms VALUES (?, ?, ?)',
                ((term, kind, entry.sequence_id)
                 for entry in batch
                 for kind, attribute in self.TERM_KINDS
                 for term in set(getattr(entry, attribute) or ())))


    @staticmethod
    def _entry(row):
        values = dict(zip(('sequence_id',) + LexiconEntry.LIST_FIELDS, row))
        for name in LexiconEntry.LIST_FIELDS:
            factory = {'source_languages': SourceLanguage,
                       'examples': UsageExample}.get(name)
            values[name] = from_column(values[name], factory)
        return LexiconEntry(**values)


    def _select(self, conn, terms, limit):
        entries = {}
        for chunk in _chunks(terms):
            query = ('SELECT e.* FROM lexicon_entries AS e WHERE e.sequence_id '
                     'IN (SELECT t.sequence_id FROM lexicon_terms AS t '
                     'WHERE t.term IN (%s)) ORDER BY e.sequence_id'
                     % (', '.join('?' * len(chunk)),))
            if limit is not None:
                query += ' LIMIT %d' % (limit,)
            for row in conn.execute(query, chunk):
                entries.setdefault(row[0], row)
        return [self._entry(row) for _, row in sorted(entries.items())]


    async def find_by_term(self, term, limit=None):
        """Find the entries with ``term`` among their written forms, readings
        or glosses, ordered by sequence number."""
        return await self.database.run(self._select, [term], limit)


    async def find_by_terms(self, terms):
        """Find the entries matching any of ``terms`` with a single lookup."""
        terms = list(dict.fromkeys(terms))
        if not terms:
            return []
        return await self.database.run(self._select, terms, None)


    async def get(self, sequence_id):
        def get(conn):
            row = conn.execute('SELECT * FROM lexicon_entries '
                               'WHERE sequence_id = ?',
                               (sequence_id,)).fetchone()
            return None if row is None else self._entry(row)
        return await self.database.run(get)


    async def find_by_fragment(self, fragment, limit=20):
        """Find the entries with a written form or reading that contains
        ``fragment``, ordered by sequence number."""
        def find(conn):
            rows = conn.execute(
                'SELECT e.* FROM lexicon_entries AS e WHERE e.sequence_id '
                'IN (SELECT t.sequence_id FROM lexicon_terms AS t '
                "WHERE t.kind != 'gloss' AND t.term GLOB ?) "
                'ORDER BY e.sequence_id LIMIT ?',
                (glob_pattern(fragment), limit))
            return [self._entry(row) for row in rows]
        if not fragment:
            return []
        return await self.database.run(find)


class CharacterRepository(_Repository):
    """Kanji characters, looked up by literal, reading, meaning or metadata."""

    table = 'kanji_characters'


    def _insert(self, conn, batch):
        columns = CharacterEntry._fields
        statement = ('INSERT OR REPLACE INTO kanji_characters (%s) VALUES (%s)'
                     % (', '.join(columns), ', '.join('?' * len(columns))))
        with conn:
            conn.executemany(
                statement,
                (tuple(to_column(value) if name in _CHARACTER_JSON else value
                       for name, value in zip(columns, character))
                 for character in batch))


    @staticmethod
    def _character(row):
        return CharacterEntry(*(from_column(value)
                                if name in _CHARACTER_JSON else value
                                for name, value in zip(CharacterEntry._fields,
                                                       row)))


    def _select(self, conn, literals):
        characters = []
        for chunk in _chunks(literals):
            characters.extend(self._character(row) for row in conn.execute(
                'SELECT * FROM kanji_characters WHERE literal IN (%s)'
                % (', '.join('?' * len(chunk)),), chunk))
        return characters


    async def find_by_literal(self, literal):
        """Find the character ``literal``, ``None`` if it is unknown."""
        characters = await self.database.run(self._select, [literal])
        return characters[0] if characters else None


    async def find_by_literals(self, literals):
        """Find all known characters among ``literals`` with a single lookup."""
        literals = list(dict.fromkeys(literals))
        if not literals:
            return []
        return await self.database.run(self._select, literals)


    def _where(self, conn, conditions, parameters, limit=None):
        query = 'SELECT * FROM kanji_characters AS k'
        if conditions:
            query += ' WHERE ' + ' AND '.join(conditions)
        # Most frequent first; characters without a rank last
        query += ' ORDER BY k.frequency IS NULL, k.frequency, k.literal'
        if limit is not None:
            query += ' LIMIT %d' % (limit,)
        return [self._character(row) for row in conn.execute(query,
                                                             parameters)]


    @staticmethod
    def _meaning_condition(count):
        return ('EXISTS (SELECT 1 FROM json_each(k.meanings, ?) AS m WHERE %s)'
                % (' OR '.join(['instr(casefold(m.value), ?) > 0'] * count),))


    @staticmethod
    def _language_path(language):
        return '$."%s"' % (language.replace('"', ''),)


    async def find_by_meaning(self, meaning, language='en', limit=None):
        """Find the characters with a meaning in ``language`` that contains
        ``meaning``, ignoring case."""
        return await self.find_by_meanings([meaning], language, limit)


    async def find_by_meanings(self, meanings, language='en', limit=None):
        """Find the characters with a meaning in ``language`` that contains any
        of ``meanings``, ignoring case, with a single lookup per chunk of
        meanings.

        :return: A list of distinct characters, most frequent first.

        """
        meanings = list(dict.fromkeys(meaning.casefold()
                                      for meaning in meanings if meaning))
        if not meanings:
            return []

        def find(conn):
            characters = {}
            for chunk in _chunks(meanings):
                for character in self._where(
                        conn, [self._meaning_condition(len(chunk))],
                        [self._language_path(language)] + chunk, limit):
                    characters.setdefault(character.literal, character)
            found = list(characters.values())
            return found if limit is None else found[:limit]
        return await self.database.run(find)


    async def find_by_jlpt_level(self, level, limit=None):
        return await self.search(jlpt_level=level, limit=limit)


    async def find_by_grade(self, grade, limit=None):
        return await self.search(grade=grade, limit=limit)


    async def find_by_stroke_count(self, count, limit=None):
        return await self.search(stroke_count=count, limit=limit)


    async def search(self, literal=None, on_reading=None, kun_reading=None,
                     meaning=None, jlpt_level=None, grade=None,
                     stroke_count=None, language='en', limit=None):
        """Find the characters that satisfy all given criteria.

        Criteria that are ``None`` or empty are ignored; without any criterion,
        all characters are returned.

        :param str literal: The character itself.

        :param str on_reading: One of the on readings, exactly.

        :param str kun_reading: One of the kun readings, exactly.

        :param str meaning: A substring of one of the meanings in ``language``,
            ignoring case.

        :param int jlpt_level: The JLPT level.

        :param int grade: The school grade.

        :param int stroke_count: The stroke count.

        :param int limit: The maximum number of characters to return.

        :return: A list of characters, most frequent first.

        """
        conditions = []
        parameters = []
        if literal:
            conditions.append('k.literal = ?')
            parameters.append(literal)
        for column, reading in (('on_readings', on_reading),
                                ('kun_readings', kun_reading)):
            if reading:
                conditions.append('EXISTS (SELECT 1 FROM json_each(k.%s) '
                                  'WHERE value = ?)' % (column,))
                parameters.append(reading)
        if meaning:
            conditions.append(self._meaning_condition(1))
            parameters.extend([self._language_path(language),
                               meaning.casefold()])
        for column, value in (('jlpt_level', jlpt_level), ('grade', grade),
                              ('stroke_count', stroke_count)):
            if value is not None:
                conditions.append('k.%s = ?' % (column,))
                parameters.append(value)
        return await self.database.run(self._where, conditions, parameters,
                                       limit)


class SentenceRepository(_Repository):
    """Example sentences, searched by substring of their text.

    Substring search uses the trigram full-text index if the database has one
    and the term is long enough, and scans the sentence table otherwise.
    Matching is case-sensitive unless a paged search asks otherwise.

    """

    table = 'sentences'


    def _clear(self, conn):
        with conn:
            conn.execute('DELETE FROM sentences')
            if self.database.full_text:
                conn.execute('DELETE FROM sentences_fts')


    def _insert(self, conn, batch):
        now = _now()
        with conn:
            conn.executemany(
                'INSERT OR REPLACE INTO sentences VALUES (?, ?, ?, ?, ?)',
                ((sentence.id, sentence.language, sentence.text, now, now)
                 for sentence in batch))
            if self.database.full_text:
                conn.executemany('DELETE FROM sentences_fts WHERE rowid = ?',
                                 ((sentence.id,) for sentence in batch))
                conn.executemany(
                    'INSERT INTO sentences_fts (rowid, text) VALUES (?, ?)',
                    ((sentence.id, sentence.text) for sentence in batch))


    @staticmethod
    def _sentence(row):
        sentence_id, language, text, created_at, updated_at = row
        return ExampleSentence(sentence_id, language, text,
                               datetime.fromisoformat(created_at),
                               datetime.fromisoformat(updated_at))


    def _indexed(self, term):
        # The trigram index only answers patterns with three literal characters
        return (self.database.full_text and len(term) >= TRIGRAM_LENGTH
                and re.search(r'[*?\[\]]', term) is None)


    def _matching(self, term, language, ignore_case=False):
        """Build the query selecting the sentences that contain ``term``.

        :return: The query and its parameters.

        """
        if ignore_case:
            query = ('SELECT s.* FROM sentences AS s '
                     'WHERE instr(casefold(s.text), ?) > 0')
            parameters = [term.casefold()]
        elif self._indexed(term):
            query = ('SELECT s.* FROM sentences_fts AS f '
                     'JOIN sentences AS s ON s.id = f.rowid '
                     'WHERE f.text GLOB ?')
            parameters = [glob_pattern(term)]
        else:
            query = 'SELECT s.* FROM sentences AS s WHERE s.text GLOB ?'
            parameters = [glob_pattern(term)]
        if language is not None:
            query += ' AND s.language = ?'
            parameters.append(language)
        return query, parameters


    def _search(self, conn, terms, limit, language):
        sentences = {}
        for chunk in _chunks(terms):
            queries = []
            parameters = []
            for term in chunk:
                query, values = self._matching(term, language)
                queries.append('SELECT * FROM (%s ORDER BY s.id LIMIT ?)'
                               % (query,))
                parameters.extend(values)
                parameters.append(limit)
            # UNION removes sentences matched by several terms
            for row in conn.execute(' UNION '.join(queries), parameters):
                sentences.setdefault(row[0], row)
        return [self._sentence(row) for _, row in sorted(sentences.items())]


    def _page(self, conn, term, limit, offset, language, ignore_case):
        query, parameters = self._matching(term, language, ignore_case)
        total = conn.execute('SELECT COUNT(*) FROM (%s)' % (query,),
                             parameters).fetchone()[0]
        rows = conn.execute(query + ' ORDER BY s.id LIMIT ? OFFSET ?',
                            parameters + [limit, offset])
        return SentencePage([self._sentence(row) for row in rows], total)


    async def search_page(self, term, limit=20, offset=0, language=None,
                          ignore_case=False):
        """Find one page of the sentences containing ``term``.

        :param int limit: Maximum number of sentences on the page.

        :param int offset: Number of matching sentences to skip.

        :param language: If not ``None``, only search sentences in this
            language.

        :param bool ignore_case: Whether to match regardless of case.  Always
            scans the sentence table.

        :return: A :class:`SentencePage` of sentences ordered by sentence
            number, and the number of all matching sentences.

        """
        if offset < 0:
            raise ValueError('Unable to skip %r sentences' % (offset,))
        if not term:
            return SentencePage([], 0)
        return await self.database.run(self._page, term, limit, offset,
                                       language, ignore_case)


    async def search_text(self, terms, limit=20, language=None):
        """Find the sentences containing any of ``terms``.

        :param terms: A string or a sequence of strings.  Several terms are
            looked up with a single query.

        :param int limit: Maximum number of sentences per term.

        :param language: If not ``None``, only return sentences in this
            language (an ISO 639-3 code, e.g. ``'jpn'``).

        :return: A list of distinct sentences, ordered by sentence number.

        """
        if isinstance(terms, str):
            terms = [terms]
        terms = list(dict.fromkeys(term for term in terms if term))
        if not terms:
            return []
        return await self.database.run(self._search, terms, limit, language)


    async def get(self, sentence_id):
        def get(conn):
            row = conn.execute('SELECT * FROM sentences WHERE id = ?',
                               (sentence_id,)).fetchone()
            return None if row is None else self._sentence(row)
        return await self.database.run(get)


    async def by_language(self, language, limit=20, offset=0):
        """Return ``limit`` sentences in ``language``, skipping the first
        ``offset``.  :meth:`count` gives the total."""
        def select(conn):
            return [self._sentence(row) for row in conn.execute(
                'SELECT * FROM sentences WHERE language = ? '
                'ORDER BY id LIMIT ? OFFSET ?', (language, limit, offset))]
        return await self.database.run(select)


    async def count(self, language=None):
        """Count the sentences, optionally only those in ``language``."""
        if language is None:
            return await super().count()
        def count(conn):
            return conn.execute('SELECT COUNT(*) FROM sentences '
                                'WHERE language = ?', (language,)).fetchone()[0]
        return await self.database.run(count)
