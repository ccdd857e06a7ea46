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


"""Parse lines of the Tatoeba sentence export."""


from . import safe_int
from ..records import ExampleSentence
from ...errors import MalformedRecord


FIELD_COUNT = 3
"""Number of positional fields: sentence number, language, text."""


def parse_sentence_line(line):
    """Parse one ``id<TAB>language<TAB>text`` line.

    Columns beyond the third are ignored.

    :param str line: The line, without its terminator.

    :return: The parsed sentence, without timestamps.

    :raises MalformedRecord: If a field is missing or empty, or the sentence
        number is not numeric.

    """
    fields = line.split('\t')
    if len(fields) < FIELD_COUNT or not all(fields[:FIELD_COUNT]):
        raise MalformedRecord('Expected %d non-empty fields' % (FIELD_COUNT,),
                              line)
    sentence_id = safe_int(fields[0])
    if sentence_id is None:
        raise MalformedRecord('Sentence number %r is not numeric'
                              % (fields[0],), line)
    return ExampleSentence(sentence_id, fields[1], fields[2])
