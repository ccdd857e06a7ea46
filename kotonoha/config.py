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


"""Runtime settings, read from environment variables."""


import os
from collections import namedtuple

from .errors import ConfigurationMissing


DEFAULT_DATABASE = 'data/processed/kotonoha.db'
DEFAULT_BATCH_SIZE = 1000
DEFAULT_SEARCH_LIMIT = 20

ENABLE_VARIABLES = {'jmdict': 'LOAD_JM_DICT',
                    'kanjidic': 'LOAD_KANJI_DICT',
                    'tatoeba': 'LOAD_TATOEBA'}
"""Environment variables enabling the reload of each corpus."""

PATH_VARIABLES = {'jmdict': 'JM_DICT_PATH',
                  'kanjidic': 'KANJI_DICT_PATH',
                  'tatoeba': 'TATOEBA_PATH'}
"""Environment variables holding the input file of each corpus."""

_TRUE = ('true', '1', 'yes', 'on')


def _flag(value):
    return value is not None and value.strip().lower() in _TRUE


def _positive_int(environ, name, default):
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        value = int(value)
    except ValueError:
        value = 0
    if value < 1:
        raise ConfigurationMissing('%s must be a positive integer, got %r'
                                   % (name, environ[name]))
    return value


class Settings(namedtuple('Settings', ('database', 'load_jmdict',
                                       'jmdict_path', 'load_kanjidic',
                                       'kanjidic_path', 'load_tatoeba',
                                       'tatoeba_path', 'batch_size',
                                       'search_limit', 'gloss_languages',
                                       'elasticsearch_host'))):
    """The settings of one run.

    Paths and hosts are ``None`` when not configured.  ``gloss_languages`` is
    a tuple of ISO 639-2 codes, or ``None`` to keep glosses in all languages.

    """

    __slots__ = ()


    @classmethod
    def from_environ(cls, environ=None):
        """Read the settings from environment variables.

        :param environ: A mapping of variable names to values, defaults to
            :data:`os.environ`.

        :raises ConfigurationMissing: If the database setting is empty or a
            numeric setting is not a positive integer.

        """
        if environ is None:
            environ = os.environ
        database = environ.get('KOTONOHA_DATABASE', DEFAULT_DATABASE)
        if not database.strip():
            raise ConfigurationMissing('KOTONOHA_DATABASE is empty')
        gloss_languages = tuple(
            language.strip()
            for language in environ.get('GLOSS_LANGUAGES', '').split(',')
            if language.strip())
        return cls(
            database=database,
            load_jmdict=_flag(environ.get('LOAD_JM_DICT')),
            jmdict_path=environ.get('JM_DICT_PATH') or None,
            load_kanjidic=_flag(environ.get('LOAD_KANJI_DICT')),
            kanjidic_path=environ.get('KANJI_DICT_PATH') or None,
            load_tatoeba=_flag(environ.get('LOAD_TATOEBA')),
            tatoeba_path=environ.get('TATOEBA_PATH') or None,
            batch_size=_positive_int(environ, 'BATCH_SIZE',
                                     DEFAULT_BATCH_SIZE),
            search_limit=_positive_int(environ, 'SEARCH_LIMIT',
                                       DEFAULT_SEARCH_LIMIT),
            gloss_languages=gloss_languages or None,
            elasticsearch_host=environ.get('ELASTICSEARCH_HOST') or None)


    def enabled(self, corpus):
        """Whether reloading the corpus named ``corpus`` is enabled."""
        return getattr(self, 'load_%s' % (corpus,))


    def require_path(self, corpus):
        """Return the configured input file of the corpus named ``corpus``.

        :raises ConfigurationMissing: If no file is configured.

        """
        path = getattr(self, '%s_path' % (corpus,))
        if path is None:
            raise ConfigurationMissing('No input file for %s, set %s'
                                       % (corpus, PATH_VARIABLES[corpus]))
        return path
