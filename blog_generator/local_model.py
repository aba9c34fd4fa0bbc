"""Local Hugging Face text backend.

Runs a seq2seq checkpoint (hub id or directory) or a PEFT adapter directory
in-process and exposes it through the same `generate_text` call as the hosted
backend. Decoding budgets follow the blog prompt's word target.
"""

import logging
import math
from pathlib import Path
from typing import Dict, Optional, Tuple

from peft import PeftConfig, PeftModel
import torch
from transformers import AutoModelForSeq2SeqLM, AutoTokenizer

from blog_generator.errors import EmptyContentError
from blog_generator.prompting import MAX_WORDS, MIN_WORDS

logger = logging.getLogger(__name__)

# Rough subword-per-word ratio for English with T5-style tokenizers.
TOKENS_PER_WORD = 1.35
MAX_PROMPT_TOKENS = 2048

SAMPLING_PARAMS: Dict = {
    "do_sample": True,
    "temperature": 0.8,
    "top_p": 0.9,
    "top_k": 50,
    "repetition_penalty": 1.2,
    "no_repeat_ngram_size": 4,
    "length_penalty": 1.0,
}

# Fragments of the prompt's own wording that mean the model parroted the
# instructions instead of writing the post.
PLACEHOLDER_SIGNALS = (
    "write a comprehensive",
    "requirements:",
    "strict formatting rules",
    "**text**",
    "<topic>",
)


def token_budget(min_words: int = MIN_WORDS, max_words: int = MAX_WORDS) -> Dict[str, int]:
    """`min_new_tokens`/`max_new_tokens` covering the requested word range."""
    return {
        "min_new_tokens": math.ceil(min_words * TOKENS_PER_WORD),
        "max_new_tokens": math.ceil(max_words * TOKENS_PER_WORD),
    }


def adapter_base_model(model_name_or_path: str) -> Optional[str]:
    """Base checkpoint named by an adapter directory, or None for a plain model.

    Raises ValueError for an adapter directory that names no base model.
    """
    if not (Path(model_name_or_path) / "adapter_config.json").is_file():
        return None
    base = PeftConfig.from_pretrained(model_name_or_path).base_model_name_or_path
    if not base:
        raise ValueError("Adapter config is missing `base_model_name_or_path`.")
    return base


def load_seq2seq(model_name_or_path: str) -> Tuple[object, object]:
    """Tokenizer and model for a checkpoint, wrapping adapters around their base."""
    tokenizer = AutoTokenizer.from_pretrained(model_name_or_path)
    base = adapter_base_model(model_name_or_path)
    if base is None:
        return tokenizer, AutoModelForSeq2SeqLM.from_pretrained(model_name_or_path)

    logger.info("Applying adapter %s on top of %s", model_name_or_path, base)
    model = PeftModel.from_pretrained(AutoModelForSeq2SeqLM.from_pretrained(base), model_name_or_path)
    return tokenizer, model


def strip_prompt_echo(decoded: str, prompt: str) -> str:
    """Drop the prompt (or leading lines copied from it) from decoded output."""
    text = decoded.strip()
    instructions = prompt.strip()
    if text.startswith(instructions):
        return text[len(instructions):].strip()

    prompt_lines = {line.strip() for line in instructions.splitlines() if line.strip()}
    lines = text.splitlines()
    while lines and (not lines[0].strip() or lines[0].strip() in prompt_lines):
        lines.pop(0)
    return "\n".join(lines).strip()


def looks_like_placeholder(text: str) -> bool:
    lowered = text.lower()
    return any(signal in lowered for signal in PLACEHOLDER_SIGNALS)


class LocalModelBackend:
    """Runs blog generation in-process on a Hugging Face seq2seq model."""

    name = "local"

    def __init__(self, model_name_or_path: str = "google/flan-t5-base"):
        self.model_name_or_path = model_name_or_path
        self.device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
        self.tokenizer, model = load_seq2seq(model_name_or_path)
        self.model = model.to(self.device)
        self.generation_params = {**SAMPLING_PARAMS, **token_budget()}
        logger.info("Loaded local model %s on %s", model_name_or_path, self.device)

    def generate_text(self, prompt: str) -> str:
        """Generate one post; raises `EmptyContentError` for blank or parroted output."""
        inputs = self.tokenizer(
            prompt,
            return_tensors="pt",
            truncation=True,
            max_length=MAX_PROMPT_TOKENS,
        ).to(self.device)

        with torch.no_grad():
            output_ids = self.model.generate(**inputs, **self.generation_params)

        decoded = self.tokenizer.decode(output_ids[0], skip_special_tokens=True)
        text = strip_prompt_echo(decoded, prompt)
        if not text or looks_like_placeholder(text):
            logger.warning("Local model %s produced no usable article", self.model_name_or_path)
            raise EmptyContentError("Failed to generate content")
        return text
