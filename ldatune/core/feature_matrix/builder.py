from __future__ import annotations
import logging
from typing import List, Optional

from sklearn.feature_extraction.text import CountVectorizer

from ldatune.core.collocation.base import Collocator
from ldatune.core.collocation.phrases import PhraseCollocator
from ldatune.core.corpus.collection import DocumentCollection
from ldatune.core.feature_matrix.config import FeatureMatrixConfig
from ldatune.core.feature_matrix.matrix import DocumentFeatureMatrix
from ldatune.core.stemming.base import Stemmer
from ldatune.core.stemming.stemmer import SnowballTokenStemmer
from ldatune.core.stopword_removal.base import StopwordRemover
from ldatune.core.stopword_removal.removal import DefaultStopwordRemover
from ldatune.core.tokenization.base import Tokenizer
from ldatune.core.tokenization.tokenizer import DefaultTokenizer
from ldatune.utils.exceptions import CorpusError
from ldatune.utils.telemetry import step

logger = logging.getLogger(__name__)


def _pre_analyzed(tokens: List[str]) -> List[str]:
    return tokens


class DfmBuilder:
    """
    tokens -> stopwords removed -> collocations merged -> stems -> counts -> trim
    """

    def __init__(
        self,
        *,
        tokenizer: Optional[Tokenizer] = None,
        stopwords: Optional[StopwordRemover] = None,
        collocator: Optional[Collocator] = None,
        stemmer: Optional[Stemmer] = None,
        config: Optional[FeatureMatrixConfig] = None,
    ):
        self.tokenizer = tokenizer or DefaultTokenizer()
        self.stopwords = stopwords or DefaultStopwordRemover()
        self.collocator = collocator or PhraseCollocator()
        self.stemmer = stemmer or SnowballTokenStemmer()
        self.cfg = config or FeatureMatrixConfig()

    def analyze(self, collection: DocumentCollection) -> List[List[str]]:
        docs: List[List[str]] = []
        for text in collection.texts:
            cleaned, _ = self.stopwords.remove(self.tokenizer.tokenize(text))
            docs.append(cleaned)
        self.collocator.fit(docs)
        return [self.stemmer.stem(self.collocator.merge(d)) for d in docs]

    def build(self, collection: DocumentCollection) -> DocumentFeatureMatrix:
        with step("dfm.build", n_docs=len(collection)):
            docs = self.analyze(collection)
            vect = CountVectorizer(analyzer=_pre_analyzed, lowercase=False)
            try:
                X = vect.fit_transform(docs)
            except ValueError as e:
                # sklearn raises on an empty vocabulary
                raise CorpusError(code="EMPTY_VOCABULARY", message=str(e)) from e

            dfm = DocumentFeatureMatrix(
                counts=X,
                vocabulary=tuple(vect.get_feature_names_out()),
                doc_ids=collection.doc_ids,
                docvars=collection.docvars,
            )
            logger.info("Built dfm: %d docs x %d terms", dfm.n_docs, dfm.n_terms)

            dfm = dfm.trim(
                min_termfreq=self.cfg.min_termfreq,
                min_docfreq=self.cfg.min_docfreq,
                max_docfreq=self.cfg.max_docfreq,
                max_features=self.cfg.max_features,
            )
            if self.cfg.drop_empty_documents:
                before = dfm.n_docs
                dfm = dfm.drop_empty_documents()
                if dfm.n_docs < before:
                    logger.warning(
                        "Dropped %d documents left empty after trimming",
                        before - dfm.n_docs,
                    )
            logger.info("Trimmed dfm: %d docs x %d terms", dfm.n_docs, dfm.n_terms)
            logger.info(
                "Top features: %s",
                ", ".join(f"{w} ({n})" for w, n in dfm.top_features(self.cfg.log_top_features)),
            )
            return dfm
