"""Panel script and panel image prompt templates."""

SCRIPT_PROMPT = """
You are a comic book writer. Your task is to break down the following story into a sequence of comic book panels. The story involves these characters: {{ character_names | join(', ') }}. The desired style is {{ style }}.

Rules:
1. Create a maximum of {{ max_panels }} panels.
2. For each panel, provide a panel number.
3. Provide a brief narration for the scene.
4. List the characters present in the panel.
5. Provide the dialogue for each character in the panel. If a character has no dialogue, use an empty string.

Story: "{{ story }}"
"""

PANEL_PROMPT = """
Generate a single comic book panel in a "{{ style }}" style with a "{{ palette }}" color palette.
The scene is: "{{ narration }}".
Characters present: {{ names | join(', ') }}.
{% for line in dialogue %}
{{ line.name }} says: "{{ line.dialogue }}"
{% endfor %}
Crucially, show the characters interacting with dynamic and expressive body language that reflects the conversation. Do not just show static portraits.
Use the provided reference images to inform the characters' appearance and clothing, but create a completely new, original illustration that fits the scene.
"""
