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


"""Error taxonomy.

Record-level errors (:class:`MalformedRecord`, :class:`UnknownVocabulary`) are
recovered where they occur and never surface past the loader.  Batch-level and
configuration errors (:class:`StoreWriteFailure`, :class:`ConfigurationMissing`)
propagate to the caller.

"""


class KotonohaError(Exception):
    """Base class of all errors raised by this package."""
    pass


class MalformedRecord(KotonohaError):
    """A single input record cannot be parsed.

    :param str message: What is wrong with the record.

    :param str record: The offending record text, if available.  Only a prefix
        is kept for display.

    """

    _EXCERPT_LENGTH = 80


    def __init__(self, message, record=None):
        super().__init__(message)
        self.record = record


    def __str__(self):
        message = super().__str__()
        if self.record is None:
            return message
        excerpt = ' '.join(self.record.split())
        if len(excerpt) > MalformedRecord._EXCERPT_LENGTH:
            excerpt = excerpt[:MalformedRecord._EXCERPT_LENGTH] + '…'
        return '%s: %r' % (message, excerpt)


class UnknownVocabulary(KotonohaError):
    """A token of an enumerated field has no canonical code."""

    def __init__(self, vocabulary, token):
        super().__init__('Unknown %s value %r' % (vocabulary, token))
        self.vocabulary = vocabulary
        self.token = token


class StoreWriteFailure(KotonohaError):
    """Flushing a batch to the persistent store failed.

    The affected table has already been cleared and is left partially
    populated.

    """

    def __init__(self, corpus, committed, cause):
        super().__init__('Failed to write %s batch after %d committed records: %s'
                         % (corpus, committed, cause))
        self.corpus = corpus
        self.committed = committed
        self.cause = cause


class ConfigurationMissing(KotonohaError):
    """A required setting (corpus path, store location) is absent or unusable."""
    pass
