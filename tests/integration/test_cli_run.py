from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest

from formfill.cli.__main__ import main as cli_main
from formfill.mapping.store import JsonFileMappingStore
from formfill.mapping.templates import (
    default_data_source,
    get_mapping_for_template,
    save_mapping_template,
)
from formfill.models.template_field import FieldKind, TemplateField
from formfill.pdf.fields import TemplateReadError

"""End-to-end CLI runs over real CSV / xlsx sources with a stubbed template."""

TEMPLATE_FIELDS = [
    TemplateField("Provider Name"),
    TemplateField("Email"),
    TemplateField("Phone"),
    TemplateField("State"),
    TemplateField("Zip"),
    TemplateField("NPI Number"),
    TemplateField("Accepting New Patients", FieldKind.CHECKBOX),
]


@pytest.fixture()
def template_fields():
    with patch(
        "formfill.cli.__main__.extract_template_fields", return_value=TEMPLATE_FIELDS
    ) as mock_extract:
        yield mock_extract


def _store(workdir: Path) -> JsonFileMappingStore:
    return JsonFileMappingStore(workdir / ".formfill" / "store.json")


def test_full_run_plans_and_persists(
    temp_workdir: Path, write_config, providers_csv, template_fields, capsys
):
    code = cli_main(["--output", "out/plan.json"])
    out = capsys.readouterr().out

    # Ann Lee has an invalid email, phone and zip; Bob is termed
    assert code == 2
    assert (
        "SUMMARY records=2 fields=6 mapped=6 unmapped=0 filled=0 warnings=3" in out
    )
    template_fields.assert_called_once_with(Path("./forms/enrollment.pdf"))

    plan = json.loads((temp_workdir / "out" / "plan.json").read_text(encoding="utf-8"))
    assert plan["template"] == "enrollment.pdf"
    jane = plan["plans"][0]
    assert jane["record_name"] == "Jane Smith"
    assert jane["values"] == {
        "Provider Name": "Jane Smith",
        "Email": "jane@example.com",
        "Phone": "(555) 123-4567",
        "State": "CA",
        "Zip": "12345",
        "NPI Number": "1234567890",
    }
    assert len(plan["plans"][1]["issues"]) == 3

    store = _store(temp_workdir)
    assert get_mapping_for_template(store, "enrollment.pdf") == {
        "Provider Name": "Provider Name",
        "Email": "Email",
        "Phone": "Phone",
        "State": "State",
        "Zip": "Zip",
        "NPI Number": "NPI",
    }
    assert default_data_source(store) == "./data/providers.csv"

    logs = list((temp_workdir / "logs").glob("validation-*.log"))
    assert len(logs) == 1
    assert len(logs[0].read_text(encoding="utf-8").splitlines()) == 3


def test_override_skips_field(temp_workdir: Path, write_config, providers_csv, template_fields, capsys):
    code = cli_main(["--set", "Email=", "--set", "Zip="])
    out = capsys.readouterr().out
    assert code == 2
    assert "mapped=4 unmapped=2" in out
    assert "warnings=1" in out
    assert get_mapping_for_template(_store(temp_workdir), "enrollment.pdf")["Email"] == ""

    # The saved skip holds on the next run without --set
    cli_main([])
    assert "mapped=4 unmapped=2" in capsys.readouterr().out
    assert get_mapping_for_template(_store(temp_workdir), "enrollment.pdf")["Zip"] == ""


def test_stored_mapping_is_reused(temp_workdir: Path, write_config, providers_csv, template_fields, capsys):
    store = _store(temp_workdir)
    save_mapping_template(store, "enrollment.pdf", [], {"Provider Name": "NPI", "Phone": "Gone Column"})
    cli_main(["--output", "plan.json"])
    out = capsys.readouterr().out
    assert "WARN saved mapping 'Phone': column 'Gone Column' not in data" in out

    mapping = get_mapping_for_template(store, "enrollment.pdf")
    assert mapping["Provider Name"] == "NPI"
    assert mapping["Phone"] == "Gone Column"
    assert mapping["Email"] == "Email"

    jane = json.loads((temp_workdir / "plan.json").read_text(encoding="utf-8"))["plans"][0]
    assert jane["values"]["Provider Name"] == "1234567890"
    assert "Phone" not in jane["values"]


def test_other_data_source_keeps_saved_mapping(
    temp_workdir: Path, write_config, template_fields, capsys
):
    store = _store(temp_workdir)
    save_mapping_template(store, "enrollment.pdf", [], {"Phone": "Mobile", "Provider Name": ""})
    (temp_workdir / "data" / "other.csv").write_text(
        "Provider Name,Phone\nJane Smith,5551234567\n", encoding="utf-8"
    )

    code = cli_main(["--data", "data/other.csv"])
    out = capsys.readouterr().out
    assert code == 0
    assert "mapped=0 unmapped=6" in out
    assert get_mapping_for_template(store, "enrollment.pdf") == {
        "Phone": "Mobile",
        "Provider Name": "",
    }


def test_override_to_unknown_column_warns(
    temp_workdir: Path, write_config, providers_csv, template_fields, capsys
):
    cli_main(["--set", "Email=Work Email"])
    out = capsys.readouterr().out
    assert "WARN override 'Email': unknown column 'Work Email'" in out
    assert "mapped=5 unmapped=1" in out
    # Kept for sources that do have the column
    assert get_mapping_for_template(_store(temp_workdir), "enrollment.pdf")["Email"] == "Work Email"


def test_invalid_override(temp_workdir: Path, write_config, providers_csv, template_fields, capsys):
    code = cli_main(["--set", "Email"])
    assert code == 1
    assert "ERROR override:" in capsys.readouterr().out


def test_inspect_data(temp_workdir: Path, write_config, providers_csv, template_fields, capsys):
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "layout=standard records=2 termed=1" in out
    assert "'Provider Name', 'Email', 'Phone', 'NPI', 'State', 'Zip'" in out
    assert '"Provider Name": "Jane Smith"' in out
    template_fields.assert_not_called()


def test_convert_transposed_xlsx(temp_workdir: Path, write_config, template_fields):
    source = temp_workdir / "data" / "roster.xlsx"
    df = pd.DataFrame(
        [
            ["", "Dr. A", "Dr. B, MD", "Dr. C (termed)"],
            ["NPI", "111", "222", "333"],
            ["Email", "a@x.io", "b@x.io", "c@x.io"],
        ]
    )
    with pd.ExcelWriter(source, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, header=False)

    code = cli_main(["--data", str(source), "--convert", "out/standard.csv"])
    assert code == 0
    text = (temp_workdir / "out" / "standard.csv").read_text(encoding="utf-8")
    assert text.splitlines() == [
        "Name,NPI,Email",
        "Dr. A,111,a@x.io",
        '"Dr. B, MD",222,b@x.io',
    ]


def test_remembered_data_source(temp_workdir: Path, providers_csv, template_fields, capsys):
    cfg = temp_workdir / "config" / "formfill.yml"
    cfg.write_text("template_file: forms/enrollment.pdf\n", encoding="utf-8")

    assert cli_main([]) == 1
    assert "ERROR no data source" in capsys.readouterr().out

    assert cli_main(["--data", "data/providers.csv", "--inspect-data"]) == 0
    capsys.readouterr()
    assert cli_main(["--inspect-data"]) == 0
    assert "records=2" in capsys.readouterr().out


def test_missing_data_file(temp_workdir: Path, write_config, template_fields, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR data: data file not found" in capsys.readouterr().out


def test_unsupported_data_file(temp_workdir: Path, write_config, template_fields, capsys):
    (temp_workdir / "data" / "providers.json").write_text("{}", encoding="utf-8")
    code = cli_main(["--data", "data/providers.json"])
    assert code == 1
    assert "Unsupported file type" in capsys.readouterr().out


def test_corrupt_workbook(temp_workdir: Path, write_config, template_fields, capsys):
    (temp_workdir / "data" / "broken.xlsx").write_bytes(b"not a workbook")
    code = cli_main(["--data", "data/broken.xlsx", "--inspect-data"])
    assert code == 1
    assert "ERROR data: cannot read workbook broken.xlsx" in capsys.readouterr().out


def test_xls_without_engine(temp_workdir: Path, write_config, template_fields, capsys):
    (temp_workdir / "data" / "legacy.xls").write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")
    with patch(
        "formfill.tabular.reader.pd.read_excel",
        side_effect=ImportError("Missing optional dependency 'xlrd'."),
    ):
        code = cli_main(["--data", "data/legacy.xls", "--inspect-data"])
    assert code == 1
    assert "ERROR data: cannot read legacy.xls: .xls files require xlrd" in capsys.readouterr().out


def test_unreadable_template(temp_workdir: Path, write_config, providers_csv, capsys):
    with patch(
        "formfill.cli.__main__.extract_template_fields",
        side_effect=TemplateReadError("cannot open template forms/enrollment.pdf"),
    ):
        code = cli_main([])
    assert code == 1
    assert "ERROR template: cannot open template" in capsys.readouterr().out


def test_export_and_import_mapping(temp_workdir: Path, write_config, providers_csv, template_fields, capsys):
    assert cli_main(["--export-mapping", "exported.json"]) == 1
    assert "ERROR export: no saved mapping" in capsys.readouterr().out

    cli_main([])
    assert cli_main(["--export-mapping", "exported.json"]) == 0
    exported = json.loads((temp_workdir / "exported.json").read_text(encoding="utf-8"))
    assert exported["template_name"] == "enrollment.pdf"

    exported["mappings"]["Email"] = ""
    (temp_workdir / "edited.json").write_text(json.dumps(exported), encoding="utf-8")
    assert cli_main(["--import-mapping", "edited.json"]) == 0
    assert get_mapping_for_template(_store(temp_workdir), "enrollment.pdf")["Email"] == ""


def test_import_malformed_mapping(temp_workdir: Path, write_config, capsys):
    (temp_workdir / "bad.json").write_text("[]", encoding="utf-8")
    assert cli_main(["--import-mapping", "bad.json"]) == 1
    assert "ERROR import:" in capsys.readouterr().out


def test_debug_flag_logs_auto_map(temp_workdir: Path, write_config, providers_csv, template_fields, capsys):
    cli_main(["--debug"])
    out = capsys.readouterr().out
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG auto-map 'Email' -> 'Email' (pattern)" in out
