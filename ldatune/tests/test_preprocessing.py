import pandas as pd
import pytest

from ldatune.core.collocation.config import CollocationConfig
from ldatune.core.collocation.phrases import PhraseCollocator
from ldatune.core.corpus.collection import DocumentCollection, load_csv
from ldatune.core.stemming.config import StemmingConfig
from ldatune.core.stemming.stemmer import SnowballTokenStemmer
from ldatune.core.stopword_removal.config import StopwordConfig
from ldatune.core.stopword_removal.removal import DefaultStopwordRemover
from ldatune.core.tokenization.tokenizer import DefaultTokenizer
from ldatune.utils.exceptions import CorpusError


def test_tokenizer_drops_punctuation_numbers_and_short_tokens():
    tokens = DefaultTokenizer().tokenize("The Senate passed H.R. 1234, a tax bill!")
    # "H.R." splits into one-letter pieces, which are dropped
    assert tokens == ["the", "senate", "passed", "tax", "bill"]
    assert "1234" not in tokens
    assert "," not in tokens


def test_tokenizer_handles_none():
    assert DefaultTokenizer().tokenize(None) == []


def test_stopwords_removed_and_reported():
    remover = DefaultStopwordRemover(
        StopwordConfig(custom_stopwords=frozenset({"bill"}))
    )
    cleaned, removed = remover.remove(["the", "tax", "bill", "and", "reform"])
    assert cleaned == ["tax", "reform"]
    assert set(removed) == {"the", "bill", "and"}


def test_stopword_exclusions_are_kept():
    remover = DefaultStopwordRemover(StopwordConfig(exclude_stopwords=frozenset({"not"})))
    cleaned, _ = remover.remove(["not", "the", "budget"])
    assert cleaned == ["not", "budget"]


def test_stemmer_reduces_inflections():
    stems = SnowballTokenStemmer().stem(["taxes", "bills", "running"])
    assert stems == ["tax", "bill", "run"]


def test_stemmer_stems_compounds_part_wise():
    assert SnowballTokenStemmer().stem(["health_cares"]) == ["health_care"]


def test_stemmer_can_be_disabled():
    stemmer = SnowballTokenStemmer(StemmingConfig(enabled=False))
    assert stemmer.stem(["taxes"]) == ["taxes"]


def test_collocator_merges_frequent_pairs():
    docs = [["health", "care", "bill"]] * 5 + [["tax", "cut", "plan"]] * 5
    collocator = PhraseCollocator(CollocationConfig(min_count=1, threshold=0.5)).fit(docs)
    merged = collocator.merge(["health", "care", "bill"])
    assert "health_care" in merged


def test_collocator_disabled_is_identity():
    collocator = PhraseCollocator(CollocationConfig(enabled=False)).fit(
        [["health", "care"]] * 10
    )
    assert collocator.merge(["health", "care"]) == ["health", "care"]


# -------------------------------------
# ❌ Corpus validation
# -------------------------------------
def test_collection_rejects_duplicate_ids():
    with pytest.raises(CorpusError) as exc:
        DocumentCollection(doc_ids=("a", "a"), texts=("x", "y"))
    assert exc.value.code == "DUPLICATE_DOC_IDS"


def test_collection_rejects_length_mismatch():
    with pytest.raises(CorpusError) as exc:
        DocumentCollection(
            doc_ids=("a", "b"), texts=("x", "y"), docvars=pd.DataFrame({"p": [1]})
        )
    assert exc.value.code == "LENGTH_MISMATCH"


def test_load_csv_generates_ids_and_keeps_docvars(tmp_path):
    path = tmp_path / "bills.csv"
    pd.DataFrame(
        {"text": ["tax reform", None], "party": ["D", "R"]}
    ).to_csv(path, index=False)

    collection = load_csv(path)
    assert collection.doc_ids == ("doc_1", "doc_2")
    assert collection.texts == ("tax reform", "")
    assert collection.docvars["party"].tolist() == ["D", "R"]


def test_load_csv_with_id_column(tmp_path):
    path = tmp_path / "bills.csv"
    pd.DataFrame({"bill": ["HR1", "S2"], "body": ["a", "b"]}).to_csv(path, index=False)

    collection = load_csv(path, text_column="body", id_column="bill")
    assert collection.doc_ids == ("HR1", "S2")
    assert list(collection.docvars.columns) == []


def test_load_csv_missing_text_column(tmp_path):
    path = tmp_path / "bills.csv"
    pd.DataFrame({"body": ["a"]}).to_csv(path, index=False)
    with pytest.raises(CorpusError) as exc:
        load_csv(path)
    assert exc.value.code == "TEXT_COLUMN_MISSING"


def test_subset_keeps_docvars_aligned():
    collection = DocumentCollection(
        doc_ids=("a", "b", "c"),
        texts=("x", "y", "z"),
        docvars=pd.DataFrame({"party": ["D", "R", "D"]}),
    )
    sub = collection.subset([True, False, True])
    assert sub.doc_ids == ("a", "c")
    assert sub.docvars["party"].tolist() == ["D", "D"]
