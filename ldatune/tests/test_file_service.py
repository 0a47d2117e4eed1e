import pandas as pd
import pytest

from ldatune.services.file_service import FileService
from ldatune.utils.exceptions import ConfigurationError


@pytest.fixture
def files(tmp_path):
    return FileService.local(tmp_path)


def test_gz_key_is_compressed(files, tmp_path):
    df = pd.DataFrame({"k": [10, 20], "mean_perplexity": [812.5, 790.25]})

    location = files.write_df(df, "cv/aggregate.csv.gz")

    raw = (tmp_path / "cv" / "aggregate.csv.gz").read_bytes()
    assert location.endswith("aggregate.csv.gz")
    assert raw[:2] == b"\x1f\x8b"
    pd.testing.assert_frame_equal(files.read_df("cv/aggregate.csv.gz"), df)


def test_plain_csv_keeps_named_index(files, tmp_path):
    df = pd.DataFrame({"n_ok": [5, 4]}, index=pd.Index([10, 20], name="k"))
    files.write_df(df, "aggregate.csv")
    assert (tmp_path / "aggregate.csv").read_text().splitlines() == ["k,n_ok", "10,5", "20,4"]


def test_records_as_json_lines(files):
    topics = [
        {"topic_id": "0", "keywords": "tax, budget", "label": "Topic 0"},
        {"topic_id": "1", "keywords": "health, hospit", "label": "Topic 1"},
    ]
    files.write_records(topics, "topics/topics.jsonl")

    back = files.read_df("topics/topics.jsonl")
    assert back.to_dict(orient="records") == topics


def test_keys_lists_written_files(files):
    files.write_df(pd.DataFrame({"k": [1]}), "cv/per_fold.csv")
    files.write_df(pd.DataFrame({"k": [1]}), "tuning/metrics.csv.gz")
    assert files.keys() == ["cv/per_fold.csv", "tuning/metrics.csv.gz"]
    assert files.keys("cv/") == ["cv/per_fold.csv"]


def test_repeated_gzip_writes_are_identical(files, tmp_path):
    df = pd.DataFrame({"k": [1, 2]})
    files.write_df(df, "a.csv.gz")
    files.write_df(df, "b.csv.gz")
    assert (tmp_path / "a.csv.gz").read_bytes() == (tmp_path / "b.csv.gz").read_bytes()


def test_unknown_extension(files):
    with pytest.raises(ConfigurationError) as exc:
        files.write_df(pd.DataFrame({"k": [1]}), "aggregate.parquet")
    assert exc.value.code == "UNKNOWN_FILE_FORMAT"
