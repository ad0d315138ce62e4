"""Video animation prompt template."""

VIDEO_PROMPT = """
Animate this comic panel image into a dynamic video. The video should bring the scene to life with smooth animations, character movements, and atmospheric effects. Include the following dialogue and narration as audio voiceover:

{{ script }}

Maintain the artistic style and mood of the original comic panel while adding motion and depth to the scene. The video should be 5-10 seconds long.
"""
