from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import pandas as pd

from ldatune.messages import corpus_messages as msg
from ldatune.utils.exceptions import CorpusError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentCollection:
    doc_ids: Tuple[str, ...]
    texts: Tuple[str, ...]
    docvars: pd.DataFrame = field(default_factory=pd.DataFrame)

    def __post_init__(self):
        ids = tuple(str(i) for i in self.doc_ids)
        texts = tuple("" if t is None else str(t) for t in self.texts)
        if self.docvars is None or len(self.docvars.columns) == 0:
            docvars = pd.DataFrame(index=range(len(ids)))
        else:
            docvars = self.docvars.reset_index(drop=True).copy()
        if not (len(ids) == len(texts) == len(docvars)):
            raise CorpusError(
                code="LENGTH_MISMATCH",
                message=msg.LENGTH_MISMATCH.format(
                    n_ids=len(ids), n_texts=len(texts), n_meta=len(docvars)
                ),
            )
        dupes = pd.Index(ids)[pd.Index(ids).duplicated()].unique().tolist()
        if dupes:
            raise CorpusError(
                code="DUPLICATE_DOC_IDS",
                message=msg.DUPLICATE_DOC_IDS.format(ids=", ".join(dupes[:5])),
            )
        object.__setattr__(self, "doc_ids", ids)
        object.__setattr__(self, "texts", texts)
        object.__setattr__(self, "docvars", docvars)

    def __len__(self) -> int:
        return len(self.doc_ids)

    def subset(self, mask: Sequence[bool]) -> "DocumentCollection":
        keep = [i for i, m in enumerate(mask) if m]
        return DocumentCollection(
            doc_ids=tuple(self.doc_ids[i] for i in keep),
            texts=tuple(self.texts[i] for i in keep),
            docvars=self.docvars.iloc[keep],
        )


def load_csv(
    path: Union[str, Path],
    *,
    text_column: str = "text",
    id_column: Optional[str] = None,
) -> DocumentCollection:
    """Read a one-document-per-row CSV; remaining columns become docvars."""
    df = pd.read_csv(path)
    if text_column not in df.columns:
        raise CorpusError(
            code="TEXT_COLUMN_MISSING",
            message=msg.TEXT_COLUMN_MISSING.format(column=text_column),
        )
    if id_column is not None and id_column not in df.columns:
        raise CorpusError(
            code="ID_COLUMN_MISSING",
            message=msg.ID_COLUMN_MISSING.format(column=id_column),
        )

    if id_column is None:
        ids = [f"doc_{i + 1}" for i in range(len(df))]
        meta = df.drop(columns=[text_column])
    else:
        ids = df[id_column].astype(str).tolist()
        meta = df.drop(columns=[text_column, id_column])

    collection = DocumentCollection(
        doc_ids=tuple(ids),
        texts=tuple(df[text_column].fillna("").astype(str)),
        docvars=meta,
    )
    logger.info("Loaded %d documents from %s", len(collection), path)
    return collection
