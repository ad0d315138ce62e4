"""Character prompt templates."""

EXTRACTION_PROMPT = """
Extract the character names from the following story. Ignore descriptive names and focus on proper nouns that are likely characters. Story: "{{ story }}"
"""

CHARACTER_IMAGE_PROMPT = """
Generate an anime-style character image for "{{ name }}".{% if description %} Description: {{ description }}.{% endif %} The character should be in anime/manga style with vibrant colors, expressive features, and detailed design. Create a full-body character illustration with dynamic pose and expressive features.
"""
