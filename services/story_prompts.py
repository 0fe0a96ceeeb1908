"""Prompt templates for the four generation steps"""
import random
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StepParams:
    """Sampling parameters for one completion step"""
    temperature: float
    max_tokens: int


SCRIPT_PARAMS = StepParams(temperature=0.8, max_tokens=3000)
TITLE_PARAMS = StepParams(temperature=0.7, max_tokens=100)
SCENES_PARAMS = StepParams(temperature=0.7, max_tokens=1500)
NARRATION_PARAMS = StepParams(temperature=0.7, max_tokens=3000)


CRIME_STORY_PROMPTS = [
    "Generate a true crime story about a mysterious disappearance in a small American town in the 1980s",
    "Create a true crime story about an unsolved bank heist in the 1970s with intricate planning",
    "Generate a true crime story about a cold case murder investigation that was solved decades later using DNA evidence",
    "Create a true crime story about an infamous con artist who orchestrated elaborate fraud schemes",
    "Generate a true crime story about a serial burglar who targeted wealthy neighborhoods in the 1990s",
    "Create a true crime story about a kidnapping case with an unexpected twist",
    "Generate a true crime story about corporate espionage and white-collar crime",
    "Create a true crime story about a mysterious death that was initially ruled an accident",
    "Generate a true crime story about art theft from a prestigious museum",
    "Create a true crime story about witness protection and organized crime in the mob era",
]


SCRIPT_SYSTEM_PROMPT = """You are an expert true crime storyteller for YouTube. Create engaging, dramatic, and well-researched true crime stories in English.

Your stories should:
- Be 8-12 minutes when narrated (approximately 1200-1800 words)
- Follow a clear narrative structure: setup, investigation, revelation, conclusion
- Include specific dates, locations, and character names (fictional but realistic)
- Build suspense and maintain viewer engagement
- Be factually plausible and respectful to real crime victims
- Include interesting twists and investigative details
- Use dramatic but professional language suitable for YouTube

Format the story as a complete video script with clear sections."""

TITLE_SYSTEM_PROMPT = (
    "You are an expert at creating compelling YouTube video titles for true crime content. "
    "Create titles that are attention-grabbing, mysterious, and SEO-friendly. Maximum 60 characters."
)

SCENES_SYSTEM_PROMPT = """You are a video production expert. Break down the story into 8-12 key visual scenes that would work for a YouTube video.

Each scene description should:
- Be detailed enough for stock footage selection or AI image generation
- Include time period, location, mood, and key visual elements
- Be suitable for dramatic crime documentary footage
- Avoid graphic violence but maintain suspense

Format: Return ONLY a JSON array of scene description strings."""

NARRATION_SYSTEM_PROMPT = """You are a professional voice-over script writer for true crime documentaries. Convert the story into a natural, conversational narration script.

The narration should:
- Sound natural when read aloud
- Use dramatic pauses (indicated by "...")
- Include emphasis markers (CAPS for stressed words)
- Have clear pacing and rhythm
- Be approximately 8-12 minutes when narrated at normal pace
- Include intro hook and outro call-to-action

Format with clear paragraph breaks for pacing."""


def pick_story_prompt(custom_prompt: Optional[str] = None, rng: Optional[random.Random] = None) -> str:
    """Return the caller's topic, or a random built-in one when it is blank"""
    if custom_prompt and custom_prompt.strip():
        return custom_prompt.strip()
    return (rng or random).choice(CRIME_STORY_PROMPTS)


def build_title_prompt(script_excerpt: str) -> str:
    return f"Based on this true crime story, create an engaging YouTube video title:\n\n{script_excerpt}"


def build_scenes_prompt(script: str) -> str:
    return f"Create visual scene descriptions for this true crime story:\n\n{script}"


def build_narration_prompt(script: str) -> str:
    return f"Convert this crime story into a professional narration script:\n\n{script}"
