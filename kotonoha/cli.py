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


"""Command line interface: ``kotonoha reload`` and ``kotonoha search``."""


import os
import sys
import json
import asyncio
import logging

import click

from . import __version__
from .config import Settings
from .errors import KotonohaError
from .data.loader import DataLoader, CORPORA
from .data.store import (Database, LexiconRepository, CharacterRepository,
                         SentenceRepository)
from .data.search_index import ElasticsearchSentenceIndex
from .search.aggregate import AggregationEngine
from .util.progress import ProgressBar


LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

_handler = None


def configure_logging(verbosity=0):
    """Log to ``sys.stderr``, at DEBUG level if ``verbosity`` is positive and
    at INFO level otherwise."""
    global _handler
    logger = logging.getLogger('kotonoha')
    if _handler is not None:
        logger.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG if verbosity > 0 else logging.INFO)


def _settings(database=None, **overrides):
    settings = Settings.from_environ()
    if database is not None:
        settings = settings._replace(database=database)
    return settings._replace(**{name: value
                                for name, value in overrides.items()
                                if value is not None})


def _run(coroutine):
    try:
        return asyncio.run(coroutine)
    except KotonohaError as error:
        raise click.ClickException(str(error)) from error


def _sentence_index(settings):
    if settings.elasticsearch_host is None:
        return None
    return ElasticsearchSentenceIndex.connect(settings.elasticsearch_host)


_database_option = click.option(
    '--database', '-d', type=click.Path(dir_okay=False), default=None,
    help='The SQLite database file.  Defaults to $KOTONOHA_DATABASE.')


@click.group()
@click.version_option(__version__)
@click.option('--verbose', '-v', count=True, help='Log debug messages.')
def main(verbose):
    configure_logging(verbose)


def _interactive():
    return sys.stderr.isatty()


async def _reload(settings, corpus, path):
    async with Database(settings.database) as database:
        loader = DataLoader(settings, database, _sentence_index(settings))
        if corpus == 'all':
            return await loader.load_all()
        corpus = CORPORA[corpus]
        if path is None:
            path = settings.require_path(corpus.name)
        on_read = None
        if _interactive():
            bar = ProgressBar(os.path.getsize(path),
                              prefix=lambda i, element: '%-8s |' % (corpus.name,),
                              suffix=lambda i, element: '| %s' % (element,))
            on_read = lambda i: bar.update(i, '%d bytes' % (i,))
        count = await loader.load(corpus, path, on_read=on_read)
        if on_read is not None:
            bar.finish('done')
        return {corpus.name: count}


@main.command()
@click.argument('corpus', default='all',
                type=click.Choice(('all',) + tuple(CORPORA)))
@click.option('--path', '-p', default=None,
              type=click.Path(exists=True, dir_okay=False),
              help='The input file.  Defaults to the configured file.')
@click.option('--batch-size', '-b', default=None, type=click.IntRange(min=1),
              help='The number of records per flush.  Defaults to '
              '$BATCH_SIZE or 1000.')
@_database_option
def reload(corpus, path, batch_size, database):
    """Replace the contents of a corpus (or of all enabled corpora)."""
    if corpus == 'all' and path is not None:
        raise click.UsageError('--path requires a single corpus')
    try:
        settings = _settings(database, batch_size=batch_size)
    except KotonohaError as error:
        raise click.ClickException(str(error)) from error
    counts = _run(_reload(settings, corpus, path))
    for name, count in counts.items():
        click.echo('%s: %s' % (name, 'skipped' if count is None
                               else '%d records' % (count,)))


async def _search(settings, terms):
    async with Database(settings.database) as database:
        sentences = _sentence_index(settings)
        if sentences is None:
            sentences = SentenceRepository(database)
        engine = AggregationEngine(CharacterRepository(database),
                                   LexiconRepository(database),
                                   sentences,
                                   settings.search_limit)
        if len(terms) == 1:
            return [await engine.aggregated_search(terms[0])]
        return await engine.bulk_aggregated_search(terms)


def _as_json(result):
    return {'query': result.query,
            'character': (None if result.character is None
                          else result.character._asdict()),
            'entries': [entry._asdict() for entry in result.entries],
            'examples': [example._asdict() for example in result.examples]}


def _summary(result):
    lines = [result.query]
    character = result.character
    if character is not None:
        readings = (character.on_readings or ()) + (character.kun_readings or ())
        meanings = (character.meanings or {}).get('en', ())
        lines.append('  kanji %s: %s strokes; %s; %s'
                     % (character.literal, character.stroke_count,
                        '、'.join(readings), ', '.join(meanings)))
    for entry in result.entries:
        lines.append('  %s【%s】 %s'
                     % ('・'.join(entry.kanji_forms or entry.readings[:1]),
                        '・'.join(entry.readings),
                        '; '.join(entry.glosses or ())))
    for example in result.examples:
        lines.append('  #%d %s' % (example.id, example.text))
    if len(lines) == 1:
        lines.append('  no results')
    return '\n'.join(lines)


@main.command()
@click.argument('terms', nargs=-1, required=True)
@click.option('--json', 'as_json', is_flag=True,
              help='Print the results as JSON.')
@click.option('--limit', '-l', default=None, type=click.IntRange(min=1),
              help='The maximum number of entries and of examples per term.  '
              'Defaults to $SEARCH_LIMIT or 20.')
@_database_option
def search(terms, as_json, limit, database):
    """Look up terms in all corpora."""
    try:
        settings = _settings(database, search_limit=limit)
    except KotonohaError as error:
        raise click.ClickException(str(error)) from error
    results = _run(_search(settings, terms))
    if as_json:
        click.echo(json.dumps([_as_json(result) for result in results],
                              ensure_ascii=False, indent=2, default=str))
    else:
        for result in results:
            click.echo(_summary(result))


if __name__ == '__main__':
    main()
