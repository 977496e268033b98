"""Prompts used for bedtime story text generation."""

from __future__ import annotations

STORY_PROMPT_EN = """
Please write an engaging, age-appropriate bedtime story for a {age}-year-old {gender_lower} named {name}.
The story should be suitable for children before sleep.

STORY PARAMETERS:
- Main Character Type: {character}
- Setting/Environment: {environment}
- Theme/Lesson: {theme}
- Story Length: Approximately {word_count} words
- Character Description: {gender}, {age} years old, {hair_color} {hair_type_lower} hair, {skin_tone} skin tone

STORY REQUIREMENTS:
1. The main character in the story should resemble the child ({name}).
2. The story should be gentle, positive, and appropriate for bedtime.
3. The narrative should be engaging but wind down toward the end to help with sleep.
4. Use simple language appropriate for a {age}-year-old.
5. Include an age-appropriate moral or lesson related to the theme.
6. The story should be cohesive with a clear beginning, middle, and end.
7. Avoid any scary, violent, or disturbing content.

Please provide ONLY the story text, without any additional explanations or notes.
The narrative should flow naturally and be divided into logical paragraphs.
""".strip()

STORY_PROMPT_TR = """
Lütfen {age} yaşındaki {gender_lower} bir çocuk olan {name} için uygun, ilgi çekici bir uyku masalı yaz.
Hikaye, uyku öncesi çocuklar için uygun olmalıdır.

HİKAYE PARAMETRELERİ:
- Ana Karakter Türü: {character}
- Ortam/Çevre: {environment}
- Tema/Ders: {theme}
- Hikaye Uzunluğu: Yaklaşık {word_count} kelime
- Karakter Tanımı: {gender}, {age} yaşında, {hair_color} {hair_type_lower} saçlı, {skin_tone} ten tonlu

HİKAYE GEREKSİNİMLERİ:
1. Hikayedeki ana karakter çocuğa ({name}) benzemelidir.
2. Hikaye nazik, olumlu ve uyku saati için uygun olmalıdır.
3. Anlatım ilgi çekici olmalı ancak uykuya yardımcı olmak için sona doğru sakinleşmelidir.
4. {age} yaşındaki bir çocuk için uygun basit bir dil kullanın.
5. Temayla ilgili yaşa uygun bir ahlaki ders içermelidir.
6. Hikaye net bir başlangıç, orta ve bitiş yapısı ile tutarlı olmalıdır.
7. Korkutucu, şiddet içeren veya rahatsız edici içeriklerden kaçının.

Lütfen SADECE hikaye metnini sağlayın, ek açıklamalar veya notlar olmadan.
Anlatım doğal akmalı ve mantıklı paragraflara bölünmelidir.
""".strip()
