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


"""Controlled vocabularies of enumerated JMdict fields.

Every vocabulary is a closed :class:`enum.Enum` whose values are the canonical
codes, i.e. the JMdict entity names (``'n'``, ``'adj-i'``, ``'comp'``, ...).
Raw tokens may appear in three shapes, depending on how the record text was
obtained:

* the bare entity name (``n``),
* the escaped entity reference (``&n;``), when the record text is parsed
  without the document type definition,
* the entity's expansion (``noun (common) (futsuumeishi)``), when the parser
  resolved the DTD.

:func:`resolve` maps all three onto the canonical member or, failing that,
onto an explicit :class:`Unrecognized` value.

"""


import re
import logging
from collections import namedtuple
from enum import Enum

from ..errors import UnknownVocabulary


logger = logging.getLogger(__name__)


def _member_name(code):
    return re.sub(r'\W', '_', code).upper()


def _vocabulary(name, codes):
    return Enum(name, [(_member_name(code), code) for code in codes.split()],
                module=__name__)


PartOfSpeech = _vocabulary('PartOfSpeech', '''
    n adj-f adj-i adj-ix adj-kari adj-ku adj-na adj-nari adj-no adj-pn
    adj-shiku adj-t adv adv-to aux aux-adj aux-v conj cop ctr exp int n-adv
    n-pr n-pref n-suf n-t num pn pref prt suf unc v-unspec v1 v1-s v2a-s v2b-k
    v2b-s v2d-k v2d-s v2g-k v2g-s v2h-k v2h-s v2k-k v2k-s v2m-k v2m-s v2n-s
    v2r-k v2r-s v2s-s v2t-k v2t-s v2w-s v2y-k v2y-s v2z-s v4b v4g v4h v4k v4m
    v4n v4r v4s v4t v5aru v5b v5g v5k v5k-s v5m v5n v5r v5r-i v5s v5t v5u
    v5u-s v5uru vi vk vn vr vs vs-c vs-i vs-s vt vz''')
"""Part-of-speech tags of a sense."""

Field = _vocabulary('Field', '''
    agric anat archeol archit art astron audvid aviat baseb biochem biol bot
    boxing Buddh bus cards chem chmyth Christn civeng cloth comp cryst dent ecol
    econ elec electr embryo engr ent figskt film finc fish food gardn genet
    geogr geol geom go golf gramm grmyth hanaf horse internet jpmyth kabuki law
    ling logic MA mahj manga math mech med met mil min mining motor music noh
    ornith paleo pathol pharm phil photo physics physiol politics print prowres
    psy psyanal psych rail rommyth Shinto shogi ski sports stat stockm sumo
    surg telec tradem tv vet vidg zool''')
"""Semantic fields (domains of use) of a sense."""

MiscInfo = _vocabulary('MiscInfo', '''
    abbr arch char chn col company creat dated dei derog doc euph ev fam fem
    fict form given group hist hon hum id joc leg m-sl male myth net-sl obj obs
    on-mim organization oth person place poet pol product proverb quote rare
    relig sens serv ship sl station surname uk unclass vulg work X yoji''')
"""Usage registers and other notes on a sense."""

Dialect = _vocabulary('Dialect', '''
    bra hob ksb ktb kyb kyu nab osb rkb thb tsb tsug''')
"""Regional dialects a sense belongs to."""


class KanjiInfo(Enum):
    """Annotations of a written (kanji) form."""
    ATEJI = 'ateji'
    IRREGULAR_KANA = 'ik'
    IRREGULAR_KANJI = 'iK'
    IRREGULAR_OKURIGANA = 'io'
    OUTDATED_KANJI = 'oK'
    RARE_KANJI = 'rK'
    SEARCH_ONLY = 'sK'


class ReadingInfo(Enum):
    """Annotations of a phonetic (reading) form."""
    GIKUN = 'gikun'
    IRREGULAR_KANA = 'ik'
    OUTDATED_KANA = 'ok'
    RARE_KANA = 'rk'
    SEARCH_ONLY = 'sk'


_DESCRIPTIONS = {
    PartOfSpeech: {
        # Nouns
        "noun (common) (futsuumeishi)": 'n',
        "pronoun": 'pn',
        "proper noun": 'n-pr',
        "adverbial noun (fukushitekimeishi)": 'n-adv',
        "noun (temporal) (jisoumeishi)": 'n-t',
        "noun, used as a prefix": 'n-pref',
        "noun, used as a suffix": 'n-suf',
        "noun or participle which takes the aux. verb suru": 'vs',
        # Adjectivals
        "adjective (keiyoushi)": 'adj-i',
        "adjective (keiyoushi) - yoi/ii class": 'adj-ix',
        "adjectival nouns or quasi-adjectives (keiyodoshi)": 'adj-na',
        "nouns which may take the genitive case particle `no'": 'adj-no',
        "`taru' adjective": 'adj-t',
        "`kari' adjective (archaic)": 'adj-kari',
        "`ku' adjective (archaic)": 'adj-ku',
        "`shiku' adjective (archaic)": 'adj-shiku',
        "archaic/formal form of na-adjective": 'adj-nari',
        "pre-noun adjectival (rentaishi)": 'adj-pn',
        "noun or verb acting prenominally": 'adj-f',
        # Adverbs
        "adverb (fukushi)": 'adv',
        "adverb taking the `to' particle": 'adv-to',
        # Affixes
        "prefix": 'pref',
        "suffix": 'suf',
        # Verbs
        "Ichidan verb": 'v1',
        "Ichidan verb - kureru special class": 'v1-s',
        "Ichidan verb - zuru verb (alternative form of -jiru verbs)": 'vz',
        "Godan verb with `u' ending": 'v5u',
        "Godan verb with `u' ending (special class)": 'v5u-s',
        "Godan verb with `ku' ending": 'v5k',
        "Godan verb with `gu' ending": 'v5g',
        "Godan verb with `su' ending": 'v5s',
        "Godan verb with `tsu' ending": 'v5t',
        "Godan verb with `nu' ending": 'v5n',
        "Godan verb with `bu' ending": 'v5b',
        "Godan verb with `mu' ending": 'v5m',
        "Godan verb with `ru' ending": 'v5r',
        "Godan verb with `ru' ending (irregular verb)": 'v5r-i',
        "Godan verb - -aru special class": 'v5aru',
        "Godan verb - Iku/Yuku special class": 'v5k-s',
        "Godan verb - Uru old class verb (old form of Eru)": 'v5uru',
        "Yodan verb with `ku' ending (archaic)": 'v4k',
        "Yodan verb with `gu' ending (archaic)": 'v4g',
        "Yodan verb with `su' ending (archaic)": 'v4s',
        "Yodan verb with `tsu' ending (archaic)": 'v4t',
        "Yodan verb with `nu' ending (archaic)": 'v4n',
        "Yodan verb with `hu/fu' ending (archaic)": 'v4h',
        "Yodan verb with `bu' ending (archaic)": 'v4b',
        "Yodan verb with `mu' ending (archaic)": 'v4m',
        "Yodan verb with `ru' ending (archaic)": 'v4r',
        "Nidan verb (upper class) with `ku' ending (archaic)": 'v2k-k',
        "Nidan verb (upper class) with `gu' ending (archaic)": 'v2g-k',
        "Nidan verb (upper class) with `tsu' ending (archaic)": 'v2t-k',
        "Nidan verb (upper class) with `dzu' ending (archaic)": 'v2d-k',
        "Nidan verb (upper class) with `hu/fu' ending (archaic)": 'v2h-k',
        "Nidan verb (upper class) with `bu' ending (archaic)": 'v2b-k',
        "Nidan verb (upper class) with `mu' ending (archaic)": 'v2m-k',
        "Nidan verb (upper class) with `yu' ending (archaic)": 'v2y-k',
        "Nidan verb (upper class) with `ru' ending (archaic)": 'v2r-k',
        "Nidan verb with 'u' ending (archaic)": 'v2a-s',
        "Nidan verb (lower class) with `ku' ending (archaic)": 'v2k-s',
        "Nidan verb (lower class) with `gu' ending (archaic)": 'v2g-s',
        "Nidan verb (lower class) with `su' ending (archaic)": 'v2s-s',
        "Nidan verb (lower class) with `zu' ending (archaic)": 'v2z-s',
        "Nidan verb (lower class) with `tsu' ending (archaic)": 'v2t-s',
        "Nidan verb (lower class) with `dzu' ending (archaic)": 'v2d-s',
        "Nidan verb (lower class) with `nu' ending (archaic)": 'v2n-s',
        "Nidan verb (lower class) with `hu/fu' ending (archaic)": 'v2h-s',
        "Nidan verb (lower class) with `bu' ending (archaic)": 'v2b-s',
        "Nidan verb (lower class) with `mu' ending (archaic)": 'v2m-s',
        "Nidan verb (lower class) with `yu' ending (archaic)": 'v2y-s',
        "Nidan verb (lower class) with `ru' ending (archaic)": 'v2r-s',
        "Nidan verb (lower class) with `u' ending and `we' conjugation (archaic)": 'v2w-s',
        "Kuru verb - special class": 'vk',
        "suru verb - included": 'vs-i',
        "suru verb - special class": 'vs-s',
        "su verb - precursor to the modern suru": 'vs-c',
        "irregular nu verb": 'vn',
        "irregular ru verb, plain form ends with -ri": 'vr',
        "verb unspecified": 'v-unspec',
        # Verb transitivity
        "transitive verb": 'vt',
        "intransitive verb": 'vi',
        # Auxiliaries
        "auxiliary": 'aux',
        "auxiliary verb": 'aux-v',
        "auxiliary adjective": 'aux-adj',
        # Function words
        "particle": 'prt',
        "conjunction": 'conj',
        "copula": 'cop',
        # Quantification
        "numeric": 'num',
        "counter": 'ctr',
        # Other semantic units
        "interjection (kandoushi)": 'int',
        "expressions (phrases, clauses, etc.)": 'exp',
        "unclassified": 'unc'},
    MiscInfo: {
        "honorific or respectful (sonkeigo) language": 'hon',
        "humble (kenjougo) language": 'hum',
        "polite (teineigo) language": 'pol',
        "familiar language": 'fam',
        "derogatory": 'derog',
        "children's language": 'chn',
        "female term or language": 'fem',
        "male term or language": 'male',
        "slang": 'sl',
        "manga slang": 'm-sl',
        "rare": 'rare',
        "obsolete term": 'obs',
        "archaism": 'arch',
        "archaic": 'arch',
        "poetical term": 'poet',
        "jocular, humorous term": 'joc',
        "idiomatic expression": 'id',
        "colloquialism": 'col',
        "sensitive": 'sens',
        "vulgar expression or word": 'vulg',
        "rude or X-rated term (not displayed in educational software)": 'X',
        "abbreviation": 'abbr',
        "onomatopoeic or mimetic word": 'on-mim',
        "proverb": 'proverb',
        "quotation": 'quote',
        "word usually written using kana alone": 'uk',
        "yojijukugo": 'yoji'},
    KanjiInfo: {
        "ateji (phonetic) reading": 'ateji',
        "word containing irregular kana usage": 'ik',
        "word containing irregular kanji usage": 'iK',
        "irregular okurigana usage": 'io',
        "word containing out-dated kanji": 'oK',
        "word containing out-dated kanji or kanji usage": 'oK',
        "rarely-used kanji form": 'rK',
        "search-only kanji form": 'sK'},
    ReadingInfo: {
        "gikun (meaning as reading) or jukujikun (special kanji reading)": 'gikun',
        "word containing irregular kana usage": 'ik',
        "out-dated or obsolete kana usage": 'ok',
        "old or irregular kana form": 'ok',
        "rarely used kana form": 'rk',
        "search-only kana form": 'sk'},
    Field: {
        "mathematics": 'math',
        "geometry term": 'geom',
        "engineering term": 'engr',
        "computer terminology": 'comp',
        "architecture term": 'archit',
        "physics terminology": 'physics',
        "astronomy, etc. term": 'astron',
        "chemistry term": 'chem',
        "biology term": 'biol',
        "botany term": 'bot',
        "zoology term": 'zool',
        "medicine, etc. term": 'med',
        "anatomical term": 'anat',
        "food term": 'food',
        "geology, etc. term": 'geol',
        "linguistics terminology": 'ling',
        "music term": 'music',
        "business term": 'bus',
        "economics term": 'econ',
        "finance term": 'finc',
        "law, etc. term": 'law',
        "military": 'mil',
        "sports term": 'sports',
        "baseball term": 'baseb',
        "martial arts term": 'MA',
        "sumo term": 'sumo',
        "shogi term": 'shogi',
        "mahjong term": 'mahj',
        "Buddhist term": 'Buddh',
        "Shinto term": 'Shinto'},
    Dialect: {
        "Brazilian": 'bra',
        "Hokkaido-ben": 'hob',
        "Kantou-ben": 'ktb',
        "Touhoku-ben": 'thb',
        "Tsugaru-ben": 'tsug',
        "Nagano-ben": 'nab',
        "Kyuushuu-ben": 'kyu',
        "Kansai-ben": 'ksb',
        "Kyoto-ben": 'kyb',
        "Osaka-ben": 'osb',
        "Tosa-ben": 'tsb',
        "Ryuukyuu-ben": 'rkb'}}
"""Mapping from JMdict entity expansions to canonical codes, per vocabulary."""


Unrecognized = namedtuple('Unrecognized', ('vocabulary', 'token'))
"""Result of :func:`resolve` for a token without a canonical code."""


def _candidates(token):
    token = token.strip()
    yield token
    if token.startswith('&') and token.endswith(';') and len(token) > 2:
        yield token[1:-1]


def resolve(vocabulary, token):
    """Map a raw token onto a member of ``vocabulary``.

    Look the token up directly (as a code, then as an entity expansion); if
    that fails and the token is an escaped entity reference, strip the escape
    wrapper and retry.

    :param vocabulary: One of the vocabulary enums of this module.

    :param str token: The raw token.

    :return: The vocabulary member, or an :class:`Unrecognized` value.

    """
    descriptions = _DESCRIPTIONS.get(vocabulary, {})
    for candidate in _candidates(token):
        try:
            return vocabulary(candidate)
        except ValueError:
            pass
        if candidate in descriptions:
            return vocabulary(descriptions[candidate])
    return Unrecognized(vocabulary.__name__, token)


def normalize(vocabulary, tokens, strict=False, context=None):
    """Resolve raw tokens to canonical codes, dropping unrecognized ones.

    :param vocabulary: One of the vocabulary enums of this module.

    :param tokens: An iterable of raw tokens.  Empty tokens are skipped.

    :param bool strict: Whether to raise instead of dropping unrecognized
        tokens.

    :param context: Optional identification of the record being parsed, used
        in log messages.

    :return: A list of canonical codes, in the order of ``tokens``.

    :raises UnknownVocabulary: If ``strict`` is set and a token cannot be
        resolved.

    """
    codes = []
    for token in tokens:
        if not token:
            continue
        value = resolve(vocabulary, token)
        if isinstance(value, Unrecognized):
            error = UnknownVocabulary(value.vocabulary, value.token)
            if strict:
                raise error
            if context is None:
                logger.warning('%s, dropped', error)
            else:
                logger.warning('%s in %s, dropped', error, context)
            continue
        codes.append(value.value)
    return codes
