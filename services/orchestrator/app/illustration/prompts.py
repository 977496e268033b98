"""Prompt template for page illustrations."""

from __future__ import annotations

ILLUSTRATION_PROMPT = """
Create a charming, high-quality children's book illustration for a bedtime story with NO TEXT OR WORDS visible in the image.

The scene depicts: "{page_text}"

The main character is a {age}-year-old {gender} named {name} with {hair_color} {hair_type} hair and {skin_tone} skin tone. The character is portrayed as a {character} in a {environment} setting.

The illustration should:
- Have a warm, soothing color palette suitable for bedtime
- Be in a gentle, child-friendly cartoon style
- Convey the theme of "{theme}"
- Be highly detailed but not overwhelming
- Include soft lighting and a dreamy quality
- Be appropriate for young children
- IMPORTANT: Contain NO text, words, or lettering of any kind

Use a style that's appropriate for children's books with soft edges and friendly characters. This is page {page_number} of a bedtime story, so the image should match the mood of the text.
""".strip()
