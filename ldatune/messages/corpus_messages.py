# ldatune/messages/corpus_messages.py

TEXT_COLUMN_MISSING = "Missing '{column}' column in corpus file."
ID_COLUMN_MISSING = "Missing '{column}' id column in corpus file."
DUPLICATE_DOC_IDS = "Document ids must be unique; duplicated: {ids}."
LENGTH_MISMATCH = "Got {n_ids} ids, {n_texts} texts and {n_meta} docvar rows."
COVARIATE_MISSING = "Covariate '{column}' not found in docvars."
UNKNOWN_BACKEND = "Unknown topic-model backend '{backend}'."
UNSUPPORTED_METRIC = "Metric '{metric}' is not available with backend '{backend}'."
UNKNOWN_METRIC = "Unknown tuning metric '{metric}'."
UNKNOWN_SPLIT = "Unknown split direction '{split}'."
UNKNOWN_FILE_FORMAT = "Cannot infer a file format for {key}; known: {known}."
