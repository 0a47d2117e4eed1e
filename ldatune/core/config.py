# ldatune/core/config.py

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    # run-wide defaults for evaluation sweeps
    RUN_SEED: int | None = 42  # None = no seed threaded into the fits
    FOLD_SEED: int | None = 42
    N_FOLDS: int = 5
    N_JOBS: int = 1
    FAIL_FAST: bool = False
    SPLIT: Literal["holdout_fold", "train_fold"] = "holdout_fold"

    OUTPUT_DIR: str = "outputs"

    OTEL_SERVICE_NAME: str = "ldatune"
    OTEL_SERVICE_VERSION: str | None = None
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None  # None = spans stay in-process
    OTEL_SAMPLE_RATIO: float = 1.0
    OTEL_ENABLE_METRICS: bool = False

    model_config = SettingsConfigDict(
        env_prefix="LDATUNE_",
        env_file=None,
        env_file_encoding="utf-8",
    )


settings = Settings()
