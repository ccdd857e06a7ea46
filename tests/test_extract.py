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


import io

import pytest

from kotonoha.data.extract import (TagExtractor, LineExtractor,
                                   extract_records, read_chunks)

from conftest import JMDICT, TATOEBA


def chunked(data, size):
    return [data[i:i + size] for i in range(0, len(data), size)]


class TestTagExtractor:

    @pytest.mark.parametrize('size', [1, 64, None])
    def test_records_do_not_depend_on_chunking(self, size):
        data = JMDICT.encode('utf-8')
        chunks = [data] if size is None else chunked(data, size)
        records = list(extract_records(chunks, TagExtractor('entry')))
        assert len(records) == 3
        assert all(record.startswith('<entry>') for record in records)
        assert all(record.endswith('</entry>') for record in records)
        assert records == list(extract_records([data], TagExtractor('entry')))

    def test_multibyte_characters_split_across_chunks(self):
        data = '<entry>猫</entry>'.encode('utf-8')
        # Cut inside the three bytes of 猫
        chunks = [data[:8], data[8:9], data[9:]]
        assert list(extract_records(chunks, TagExtractor('entry'))) \
            == ['<entry>猫</entry>']

    def test_text_outside_records_is_skipped(self):
        extractor = TagExtractor('entry')
        assert extractor.feed('<JMdict>junk<ent') == []
        assert extractor.feed('ry>a</entry>more junk') == ['<entry>a</entry>']

    def test_unterminated_record_is_retained(self):
        extractor = TagExtractor('entry')
        assert extractor.feed('<entry>a</ent') == []
        assert extractor.feed('ry><entry>b</entry>') \
            == ['<entry>a</entry>', '<entry>b</entry>']

    def test_dangling_partial_record_is_discarded(self):
        chunks = ['<entry>a</entry>', '<entry>b']
        assert list(extract_records(chunks, TagExtractor('entry'))) \
            == ['<entry>a</entry>']

    def test_several_records_per_chunk(self):
        extractor = TagExtractor('character')
        assert extractor.feed('<character>a</character>\n'
                              '<character>b</character>') \
            == ['<character>a</character>', '<character>b</character>']


class TestLineExtractor:

    @pytest.mark.parametrize('size', [1, 64, None])
    def test_lines_do_not_depend_on_chunking(self, size):
        data = TATOEBA.encode('utf-8')
        chunks = [data] if size is None else chunked(data, size)
        lines = list(extract_records(chunks, LineExtractor()))
        assert lines == TATOEBA.splitlines()

    def test_carriage_returns_and_blank_lines(self):
        assert list(extract_records([b'a\r\n\r\n', b'b\n  \nc'],
                                    LineExtractor())) == ['a', 'b']


class TestReadChunks:

    def test_reads_path_in_chunks(self, tatoeba_file):
        chunks = list(read_chunks(tatoeba_file, 16))
        assert all(len(chunk) <= 16 for chunk in chunks)
        assert b''.join(chunks) == tatoeba_file.read_bytes()

    def test_reads_file_object(self):
        assert list(read_chunks(io.BytesIO(b'abcde'), 2)) \
            == [b'ab', b'cd', b'e']

    def test_rejects_empty_chunks(self):
        with pytest.raises(ValueError):
            list(read_chunks(io.BytesIO(b'abc'), 0))
