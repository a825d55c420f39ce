"""
Purpose:
- Prompt texts for the five Gemini call sites (caption, style, face/emotion, alt-text, translation).
- Kept here so wording changes never touch transport or parsing code.
"""

STYLE_CHOICES = (
    "landscape, portrait, art (e.g., painting, drawing), selfie, abstract, macro, candid, "
    "cityscape, nature, architecture, food, fashion, sports, event, product"
)

def caption_prompt(style: str, include_hashtags: bool) -> str:
    prompt = (
        f"Generate a single, {style} caption for this image. "
        "Do NOT provide multiple options or numbered lists. Just give me one caption."
    )
    if include_hashtags:
        prompt += " Also, suggest 5-10 relevant and trending hashtags."
    return prompt

STYLE_PROMPT = (
    "Analyze this image and identify its primary style or genre. "
    f"Choose only one from the following options: {STYLE_CHOICES}. "
    "Provide ONLY the chosen style name, nothing else."
)

FACE_EMOTION_PROMPT = (
    "Analyze this image for human faces. If faces are present, describe their approximate number "
    "and their most prominent emotions (e.g., happy, sad, neutral, surprised, angry, confused, "
    "disgusted, fearful). If no faces are clearly visible, state 'No faces detected.' "
    "Be concise and provide only the description."
)

def alt_text_prompt(max_chars: int = 125) -> str:
    return (
        "Generate a concise, descriptive, and SEO-optimized alt-text (alternative text) for this image. "
        "Focus on relevant keywords and describe the image content accurately for accessibility "
        f"and search engines. Provide ONLY the alt-text, nothing else. Max {max_chars} characters."
    )

def translation_prompt(text: str, language: str) -> str:
    return (
        f"Translate the following text into {language}. "
        f'Provide ONLY the translated text, nothing else:\n\n"{text}"'
    )
