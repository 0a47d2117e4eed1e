from __future__ import annotations
import re
from typing import List

from nltk.tokenize import wordpunct_tokenize

from ldatune.core.tokenization.base import Tokenizer
from ldatune.core.tokenization.config import TokenizationConfig

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


class DefaultTokenizer(Tokenizer):
    """Adapter: tokenizes with NLTK wordpunct (or a regex) and filters tokens."""

    def __init__(self, config: TokenizationConfig | None = None):
        self.cfg = config or TokenizationConfig()
        self._regex = re.compile(self.cfg.regex_pattern or r"\b\w+\b")

    def _tokenize_raw(self, text: str) -> List[str]:
        s = text or ""
        if self.cfg.method == "regex":
            return self._regex.findall(s)
        return wordpunct_tokenize(s)

    def tokenize(self, text: str) -> List[str]:
        out: List[str] = []
        for t in self._tokenize_raw(text):
            if not t and self.cfg.drop_empty_tokens:
                continue
            if self.cfg.lowercase:
                t = t.lower()
            if self.cfg.keep_alnum_only and _NON_ALNUM.search(t):
                continue
            if self.cfg.remove_numbers_only and t.isdigit():
                continue
            if len(t) < self.cfg.min_token_len:
                continue
            out.append(t)
        return out
