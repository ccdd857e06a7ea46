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


"""Streaming ingestion and cross-source lookup for Japanese lexical corpora.

The package loads a multilingual lexicon (JMdict), a kanji dictionary
(KANJIDIC2) and an example sentence corpus (Tatoeba) into a relational store,
see :mod:`.data.loader`, and answers aggregated lookups against all three, see
:mod:`.search.aggregate`.

"""


import logging


__version__ = '0.1.0'


logging.getLogger(__name__).addHandler(logging.NullHandler())
