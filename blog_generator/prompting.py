"""Prompt engineering utilities for blog generation."""

from blog_generator.pipeline import PreparedTopic

# Length the prompt asks for, in words.
MIN_WORDS = 800
MAX_WORDS = 1200


def build_generation_prompt(item: PreparedTopic) -> str:
    """
    Fixed blog-post prompt. The formatting rules keep the output within what the
    text structurer understands:
    - `##` section headings and `###` subsections
    - dash-prefixed list items
    - `**bold**` for key terms only, no other asterisks
    - introduction, 3-5 main sections, conclusion
    """
    return f"""
Write a comprehensive, engaging, and well-structured blog post about: "{item.clean_topic}"

REQUIREMENTS:
- Write a detailed blog post with at least {MIN_WORDS}-{MAX_WORDS} words
- Use ## for main section headings (not #)
- Use ### for subsections
- Use regular paragraphs for content
- For lists, use simple bullet points with dashes (-)
- Use **text** ONLY for important keywords or phrases that need emphasis
- DO NOT use asterisks (*) for anything else
- DO NOT use single asterisks for bullet points
- Write in a professional, engaging, and informative tone
- Include practical examples and actionable insights
- Structure: Introduction, 3-5 main sections, conclusion
- Each section should have 2-3 substantial paragraphs
- Make it valuable and informative for readers

STRICT FORMATTING RULES:
- Never use * for bullet points (use - instead)
- Never use * for emphasis (use **text** for bold only)
- Never start lines with single *
- Keep formatting clean and minimal
- Focus on readability and content quality
- Ensure the content is original and valuable

Write a comprehensive blog post following these guidelines exactly.
""".strip()
