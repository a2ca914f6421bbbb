# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from formfill.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # The stdout handler binds sys.stdout at setup time; rebuild it per test so capsys sees output
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """template_file: ./forms/enrollment.pdf
data_file: ./data/providers.csv
store_path: ./.formfill/store.json
history_limit: 100
log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "formfill.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def standard_csv_text() -> str:
    return (
        "Provider Name,Email,Phone,NPI,State,Zip\n"
        "Jane Smith,JANE@Example.com,5551234567,1234567890,california,12345\n"
        "Bob Jones (termed),bob@example.com,5559876543,2222222222,TX,54321\n"
        "Ann Lee,ann-at-example,555123,3333333333,NY,1234\n"
    )


@pytest.fixture()
def providers_csv(temp_workdir: Path, standard_csv_text: str) -> Path:
    f = temp_workdir / "data" / "providers.csv"
    f.write_text(standard_csv_text, encoding="utf-8")
    return f
