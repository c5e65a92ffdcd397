"""Prompt templates for rotation suggestions, toy recognition and space analysis."""

from typing import List, Optional

from toyrotator.models.child import ChildProfile
from toyrotator.models.feedback import Feedback
from toyrotator.models.toy import SkillTag, Toy, ToyCategory

ROTATION_SYSTEM_PROMPT = """You are an early-childhood play specialist who plans toy rotations.
A toy rotation keeps a small set of toys available to a child for a few days while the rest are stored.
Pick toys that match the child's developmental stage and interests, balance different skills,
and favour toys the child engaged with while giving ignored toys a rest.
Only choose toys from the candidate list and refer to them by their id."""

RECOGNITION_SYSTEM_PROMPT = """You identify children's toys from a single photo.
Describe the main toy in the picture, classify it and estimate which ages it suits.
If the photo does not show a toy, answer with a low confidence."""

SPACE_SYSTEM_PROMPT = """You are an early-childhood play-space consultant.
Look at the photo of a child's play area and give practical, friendly advice
on how to display toys for a rotation: shelf space, clutter, accessibility and safety."""

AGE_STAGE_NOTES = {
    "0-12": "Infant: sensory exploration, grasping, cause and effect, high contrast.",
    "12-24": "Toddler: walking, stacking, simple pretend play, first words.",
    "24-36": "Young toddler: fine motor control, simple puzzles, imaginative play.",
    "36-60": "Preschool: role play, building, early letters and numbers, cooperation.",
    "60+": "School age: rules-based games, complex construction, reading and science.",
}


def get_stage_notes(age_months: Optional[int]) -> str:
    """
    Get developmental notes for an age.

    Args:
        age_months: Child's age in whole months, None when unknown

    Returns:
        Stage description
    """
    if age_months is None:
        return "Age unknown."
    if age_months < 12:
        return AGE_STAGE_NOTES["0-12"]
    elif age_months < 24:
        return AGE_STAGE_NOTES["12-24"]
    elif age_months < 36:
        return AGE_STAGE_NOTES["24-36"]
    elif age_months < 60:
        return AGE_STAGE_NOTES["36-60"]
    return AGE_STAGE_NOTES["60+"]


def _describe_toy(toy: Toy) -> str:
    parts = [f'- id={toy.id} "{toy.name}" ({toy.category})']
    if toy.skill_tags:
        parts.append("skills: " + ", ".join(toy.skill_tags))
    if toy.age_range:
        parts.append(f"ages {toy.age_range.min_months}-{toy.age_range.max_months} months")
    parts.append(f"status: {toy.status}")
    return "; ".join(parts)


def build_rotation_prompt(
    child: ChildProfile,
    age_months: Optional[int],
    toys: List[Toy],
    feedback: List[Feedback],
    display_count: int,
) -> str:
    """
    Build the user prompt for a rotation suggestion.

    Args:
        child: Child the rotation is for
        age_months: Child's age in months
        toys: Candidate toys
        feedback: Recent feedback, newest first
        display_count: Number of toys to pick

    Returns:
        Complete prompt
    """
    names = {toy.id: toy.name for toy in toys}
    prompt_parts = [
        f"CHILD: {child.name}, {age_months if age_months is not None else 'unknown'} months old",
        get_stage_notes(age_months),
        "Interests: " + (", ".join(child.interests) if child.interests else "none given"),
        "",
        f"CANDIDATE TOYS ({len(toys)}):",
        *[_describe_toy(toy) for toy in toys],
        "",
    ]

    if feedback:
        prompt_parts.append("RECENT FEEDBACK (newest first):")
        for entry in feedback:
            prompt_parts.append(f"- {names.get(entry.toy_id, entry.toy_id)}: {entry.engagement}")
        prompt_parts.append("")

    prompt_parts.append(
        f"Choose exactly {display_count} toys (or all candidates if there are fewer).\n"
        'Respond with a JSON object: {"toyIds": [ids], "insightSummary": "one or two sentences '
        'for the parent", "reasoning": "why these toys"}'
    )
    return "\n".join(prompt_parts)


def build_recognition_prompt() -> str:
    """User prompt for toy recognition; lists the allowed categories and tags."""
    categories = ", ".join(c.value for c in ToyCategory)
    tags = ", ".join(t.value for t in SkillTag)
    return (
        "Identify the toy in this photo.\n"
        f"category must be one of: {categories}\n"
        f"skillTags must be chosen from: {tags}\n"
        'Respond with a JSON object: {"name": "short toy name", "category": "...", '
        '"skillTags": ["..."], "ageRange": {"minMonths": 0, "maxMonths": 0}, '
        '"confidence": 0.0-1.0}'
    )


def build_space_prompt() -> str:
    return (
        "Analyze this play space for toy rotation.\n"
        'Respond with a JSON object: {"observations": ["short observations"], '
        '"insights": "a short paragraph of advice", '
        '"displayCapacitySuggestion": number of toys to display at once}'
    )
