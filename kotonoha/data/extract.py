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


"""Chunked record extraction.

Corpus files are read in chunks of arbitrary size.  Extractors buffer the
chunks and cut complete, delimiter-bounded record texts out of them, so that
chunk boundaries are invisible to consumers: every chunking of the same content
yields the same sequence of records.

"""


import codecs
from typing import Iterator


CHUNK_SIZE = 2 ** 16
"""int: Default number of bytes per chunk read from a corpus file."""


class _Extractor:
    """Shared state of the extractors: incremental decoding and the buffer."""

    def __init__(self, encoding='utf-8'):
        self._decoder = codecs.getincrementaldecoder(encoding)()
        self._buffer = ''


    def _decode(self, chunk):
        if isinstance(chunk, str):
            return chunk
        return self._decoder.decode(chunk)


    def feed(self, chunk):
        """Consume a chunk and return the record texts completed by it.

        :param chunk: A ``bytes`` or ``str`` chunk of the corpus.

        :return: A list of record texts, possibly empty.

        """
        self._buffer += self._decode(chunk)
        return self._cut()


    def close(self):
        """End the stream, discarding a dangling partial record.

        :return: The number of buffered characters that were discarded.

        """
        self._buffer += self._decoder.decode(b'', final=True)
        discarded = len(self._buffer)
        self._buffer = ''
        return discarded


    def _cut(self):
        raise NotImplementedError()


class TagExtractor(_Extractor):
    """Extractor for records of the form ``<tag>…</tag>``.

    Text between records (XML declarations, DTDs, the root element) is
    skipped.  Records must not nest in themselves.

    :param str tag: The name of the record element, e.g. ``'entry'``.

    :param str encoding: The encoding of byte chunks.

    """

    def __init__(self, tag, encoding='utf-8'):
        super().__init__(encoding)
        self.tag = tag
        self._open = '<%s>' % (tag,)
        self._close = '</%s>' % (tag,)
        self._in_record = False


    def _cut(self):
        records = []
        position = 0
        while True:
            if not self._in_record:
                start = self._buffer.find(self._open, position)
                if start == -1:
                    # Keep a possible prefix of the opening tag
                    position = max(position,
                                   len(self._buffer) - len(self._open) + 1)
                    break
                position = start
                self._in_record = True
            end = self._buffer.find(self._close,
                                    position + len(self._open))
            if end == -1:
                break
            end += len(self._close)
            records.append(self._buffer[position:end])
            position = end
            self._in_record = False
        self._buffer = self._buffer[position:]
        return records


    def close(self):
        self._in_record = False
        return super().close()


class LineExtractor(_Extractor):
    """Extractor for newline-terminated lines.

    Line terminators (``'\\n'``, optionally preceded by ``'\\r'``) are not
    part of the records.  Blank lines are skipped.

    """

    def _cut(self):
        records = []
        position = 0
        while True:
            end = self._buffer.find('\n', position)
            if end == -1:
                break
            line = self._buffer[position:end]
            if line.endswith('\r'):
                line = line[:-1]
            if line.strip():
                records.append(line)
            position = end + 1
        self._buffer = self._buffer[position:]
        return records


def extract_records(chunks, extractor) -> Iterator:
    """Lazily yield the record texts contained in a sequence of chunks.

    A partial record left after the last chunk is discarded.

    :param chunks: An iterable of ``bytes`` or ``str`` chunks.

    :param extractor: A fresh :class:`TagExtractor` or :class:`LineExtractor`.

    """
    for chunk in chunks:
        yield from extractor.feed(chunk)
    extractor.close()


def read_chunks(source, chunk_size=CHUNK_SIZE) -> Iterator:
    """Lazily read a corpus file in chunks of bytes.

    :param source: A path or a binary file object.  Paths are opened and
        closed by this generator, file objects are left open.

    :param int chunk_size: The maximum number of bytes per chunk.

    """
    if chunk_size < 1:
        raise ValueError('Unable to read chunks of %r bytes' % (chunk_size,))
    if hasattr(source, 'read'):
        yield from _read(source, chunk_size)
    else:
        with open(source, 'rb') as f:
            yield from _read(f, chunk_size)


def _read(f, chunk_size):
    while True:
        chunk = f.read(chunk_size)
        if not chunk:
            return
        yield chunk
