# ldatune/messages/evaluation_messages.py

# ✅ Positive
SWEEP_COMPLETED = "Perplexity sweep completed: {ok}/{total} pairs scored."
TUNING_COMPLETED = "Topic-number tuning completed for {n} candidates."
DISTRIBUTION_COMPLETED = "Topic distribution fitted with k={k}."

# ❌ Errors
FOLDS_NON_POSITIVE = "Fold count must be positive, got {n_folds}."
FOLDS_EXCEED_DOCS = "Cannot split {n_docs} documents into {n_folds} folds."
NO_DOCUMENTS = "Document count must be positive, got {n_docs}."
UNKNOWN_FOLD = "Fold {fold} is not one of 1..{n_folds}."
FOLDS_SIZE_MISMATCH = (
    "Fold assignment covers {n_folds_docs} documents but the matrix has {n_docs} rows."
)
TOO_FEW_TRAINING_DOCS = (
    "Training subset has {n_train} documents, fewer than k={k} topics."
)
NON_POSITIVE_K = "Topic count must be positive, got k={k}."
EMPTY_HOLDOUT = "Held-out subset for fold {fold} contains no tokens."
NON_FINITE_PERPLEXITY = "Perplexity for k={k}, fold={fold} is not finite: {value}."
FIT_FAILED = "Fitting k={k} topics failed: {error}"
SCORE_FAILED = "Scoring held-out documents failed: {error}"
SWEEP_ABORTED = "Sweep aborted at k={k}, fold={fold}: {error}"
JOB_CANCELLED = "Job cancelled before it started."
UNEXPECTED_ERROR = "Unexpected {type}: {error}"
