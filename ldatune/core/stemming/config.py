from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class StemmingConfig:
    enabled: bool = True
    language: str = "english"  # any nltk SnowballStemmer language
    ignore_stopwords: bool = False
    compound_delimiter: str = "_"  # collocations are stemmed part by part
