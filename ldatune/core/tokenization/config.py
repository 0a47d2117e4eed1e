from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TokenizationConfig:
    method: str = "wordpunct"  # "wordpunct" | "regex"
    regex_pattern: Optional[str] = None  # used if method == "regex"
    lowercase: bool = True
    min_token_len: int = 2  # drop tokens shorter than this
    keep_alnum_only: bool = True  # drops punctuation tokens
    remove_numbers_only: bool = True  # drop tokens that are purely digits
    drop_empty_tokens: bool = True
