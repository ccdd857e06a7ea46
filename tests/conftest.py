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


import asyncio

import pytest

from kotonoha.config import Settings
from kotonoha.data.store import Database


JMDICT = '''<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE JMdict [
<!ELEMENT JMdict (entry*)>
<!ELEMENT entry (ent_seq, k_ele*, r_ele+, sense+)>
<!ENTITY n "noun (common) (futsuumeishi)">
<!ENTITY uk "word usually written using kana alone">
<!ENTITY ateji "ateji (phonetic) reading">
]>
<JMdict>
<entry>
<ent_seq>1467640</ent_seq>
<k_ele>
<keb>猫</keb>
<ke_pri>ichi1</ke_pri>
<ke_pri>news1</ke_pri>
</k_ele>
<k_ele>
<keb>貓</keb>
<ke_inf>&ateji;</ke_inf>
</k_ele>
<r_ele>
<reb>ねこ</reb>
<re_pri>ichi1</re_pri>
</r_ele>
<r_ele>
<reb>ネコ</reb>
<re_nokanji/>
</r_ele>
<sense>
<pos>&n;</pos>
<misc>&uk;</misc>
<gloss>cat</gloss>
<gloss xml:lang="ger">Katze</gloss>
</sense>
<sense>
<pos>&n;</pos>
<xref>芸者</xref>
<gloss>geisha</gloss>
</sense>
</entry>
<entry>
<ent_seq>1442670</ent_seq>
<k_ele>
<keb>犬</keb>
</k_ele>
<r_ele>
<reb>いぬ</reb>
</r_ele>
<sense>
<pos>&n;</pos>
<gloss>dog</gloss>
</sense>
</entry>
<entry>
<ent_seq>1000000</ent_seq>
<r_ele>
<reb>ねこねこ</reb>
<re_restr>猫々</re_restr>
</r_ele>
<sense>
<pos>&n;</pos>
<gloss>kitties &amp; cats</gloss>
</sense>
</entry>
</JMdict>
'''


KANJIDIC = '''<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE kanjidic2 [
<!ELEMENT kanjidic2 (header,character*)>
]>
<kanjidic2>
<header>
<file_version>4</file_version>
</header>
<character>
<literal>猫</literal>
<codepoint>
<cp_value cp_type="ucs">732b</cp_value>
<cp_value cp_type="jis208">1-39-13</cp_value>
</codepoint>
<radical>
<rad_value rad_type="classical">94</rad_value>
<rad_value rad_type="nelson_c">94</rad_value>
</radical>
<misc>
<grade>8</grade>
<stroke_count>11</stroke_count>
<variant var_type="jis212">1-34-21</variant>
<freq>1702</freq>
<jlpt>2</jlpt>
</misc>
<dic_number>
<dic_ref dr_type="nelson_c">2891</dic_ref>
<dic_ref dr_type="heisig">244</dic_ref>
<dic_ref dr_type="moro" m_vol="7" m_page="0746">20516</dic_ref>
</dic_number>
<query_code>
<q_code qc_type="skip">1-3-8</q_code>
<q_code qc_type="four_corner">4426.0</q_code>
</query_code>
<reading_meaning>
<rmgroup>
<reading r_type="pinyin">mao1</reading>
<reading r_type="korean_r">myo</reading>
<reading r_type="korean_h">묘</reading>
<reading r_type="vietnam">Miêu</reading>
<reading r_type="ja_on">ビョウ</reading>
<reading r_type="ja_kun">ねこ</reading>
<meaning>cat</meaning>
<meaning m_lang="fr">chat</meaning>
</rmgroup>
<nanori>ね</nanori>
</reading_meaning>
</character>
<character>
<literal>犬</literal>
<codepoint>
<cp_value cp_type="ucs">72ac</cp_value>
</codepoint>
<misc>
<grade>1</grade>
<stroke_count>4</stroke_count>
</misc>
<reading_meaning>
<rmgroup>
<reading r_type="ja_on">ケン</reading>
<reading r_type="ja_kun">いぬ</reading>
<meaning>dog</meaning>
</rmgroup>
</reading_meaning>
</character>
</kanjidic2>
'''


TATOEBA = ('4705\tjpn\t猫が好きです。\n'
           '4706\teng\tI like cats.\n'
           '4707\tjpn\t犬と猫がいます。\n'
           '4708\tjpn\t犬が走る。\n')


@pytest.fixture
def jmdict_file(tmp_path):
    path = tmp_path / 'JMdict_e.xml'
    path.write_bytes(JMDICT.encode('utf-8'))
    return path


@pytest.fixture
def kanjidic_file(tmp_path):
    path = tmp_path / 'kanjidic2.xml'
    path.write_bytes(KANJIDIC.encode('utf-8'))
    return path


@pytest.fixture
def tatoeba_file(tmp_path):
    path = tmp_path / 'sentences.csv'
    path.write_bytes(TATOEBA.encode('utf-8'))
    return path


@pytest.fixture
def settings(tmp_path):
    return Settings.from_environ({'KOTONOHA_DATABASE':
                                  str(tmp_path / 'kotonoha.db')})


@pytest.fixture
def database(settings):
    # The connection lives on the worker thread, so each test step may use its
    # own event loop
    database = asyncio.run(Database(settings.database).open())
    yield database
    asyncio.run(database.close())