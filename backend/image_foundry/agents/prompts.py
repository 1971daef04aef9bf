"""Prompt templates and phrase pools for the description pipeline."""

DESCRIBER_SYSTEM_PROMPT = """You are an expert at writing detailed, vivid image descriptions for AI image generation.
Take the user's prompt and expand it into a rich description that would help create the perfect image.

Guidelines:
1. Keep the user's subject exactly as they stated it
2. Focus on visual details, lighting, composition, style, and atmosphere
3. Describe only what can be seen - no backstory, no dialogue
4. Keep it under 200 words but make it comprehensive
5. Output the description only, without a title, preamble, or quotes
"""

DESCRIBER_TASK_PROMPT = """Create a detailed image description for: {user_prompt}"""

REFINER_SYSTEM_PROMPT = """You are helping refine an image description based on user feedback.
Take the original description and the user's feedback and write an improved version that
incorporates their suggestions while keeping the quality and detail of the description.
Output the refined description only, without commentary or quotes."""

REFINER_TASK_PROMPT = """Original description: {description}

User feedback: {feedback}

Please provide a refined description that incorporates the feedback:"""


# Keyword classes that select the conditional clauses of the local template.
ANIMAL_KEYWORDS = (
    "animal", "cat", "kitten", "feline", "dog", "puppy", "fox", "wolf",
    "bird", "owl", "horse", "lion", "tiger", "bear", "rabbit", "bunny",
    "deer", "dragon", "creature",
)

LANDSCAPE_KEYWORDS = (
    "landscape", "mountain", "forest", "woods", "ocean", "sea", "beach",
    "lake", "river", "valley", "field", "meadow", "desert", "snow",
    "garden", "sky", "sunset", "nature",
)

PORTRAIT_KEYWORDS = (
    "portrait", "face", "person", "people", "woman", "man", "girl", "boy",
    "child", "selfie", "headshot",
)

OPENING_TEMPLATE = "A highly detailed image of {user_prompt}."

ANIMAL_CLAUSE = (
    "The animal is captured with incredible detail, showing individual fur "
    "textures and expressive eyes that convey its personality."
)

LANDSCAPE_CLAUSE = (
    "The natural environment stretches into the distance with layered depth, "
    "from textured foreground elements to an atmospheric horizon."
)

PORTRAIT_CLAUSE = (
    "The subject's face is rendered with careful attention to skin texture, "
    "expressive eyes, and subtle emotion."
)

LIGHTING_OPTIONS = (
    "warm golden hour sunlight casting long, soft shadows",
    "bright, even daylight with crisp highlights",
    "soft diffused light from an overcast sky",
    "dramatic side lighting with deep contrast",
    "gentle morning light filtering through mist",
    "cool blue twilight with a glowing horizon",
    "studio lighting with a subtle rim light",
)

STYLE_OPTIONS = (
    "a photorealistic style with fine textures",
    "a painterly digital art style",
    "a cinematic style reminiscent of a film still",
    "a detailed watercolor illustration style",
    "a vivid concept art style",
    "a soft storybook illustration style",
    "a high-end editorial photography style",
)

COMPOSITION_OPTIONS = (
    "a balanced rule-of-thirds framing",
    "a centered, symmetrical framing",
    "a low-angle perspective that adds grandeur",
    "a close-up framing that fills the frame with the subject",
    "a wide establishing shot with generous negative space",
    "a shallow depth of field that isolates the subject",
    "a leading-line composition that draws the eye inward",
)

CLOSING_CLAUSES = (
    "Rich color palette with vibrant, harmonious tones and careful attention to contrast.",
    "Ultra high quality, sharp focus, professional detail.",
    "The overall mood is captivating and immersive, inviting the viewer to linger on every detail.",
)
