from __future__ import annotations

import pytest

from formfill.formatting.formatter import format_value
from formfill.formatting.validator import validate_value
from formfill.mapping.matcher import auto_map
from formfill.models.template_field import TemplateField
from formfill.tabular.detector import detect_transposed
from formfill.tabular.normalize import NoHeadersError, build_records, normalize_matrix, standardize
from formfill.tabular.parser import parse

"""Small end-to-end examples across parse, normalize, match and format."""


def test_termed_row_dropped_from_csv():
    rs = normalize_matrix(parse("Name,Phone\nJohn Doe,5551234567\nJane Termed,5559876543"))
    assert rs.records == [{"Name": "John Doe", "Phone": "5551234567"}]


def test_home_phone_formatting():
    assert format_value("Home Phone", "5551234567") == "(555) 123-4567"


def test_zip_code_format_and_validate():
    assert format_value("Zip Code", "123456789") == "12345-6789"
    result = validate_value("Zip Code", "1234")
    assert result.is_valid is False
    assert result.error == "ZIP code must be 5 or 9 digits"


def test_three_column_transposed_sheet_standardizes():
    matrix = [["Column 1", "Alice", "Bob"], ["Phone", "555-0001", "555-0002"]]
    # Two entities are below the detection threshold; standardize still handles the shape
    assert detect_transposed(matrix) is False
    assert standardize(matrix).records == [
        {"Name": "Alice", "Phone": "555-0001"},
        {"Name": "Bob", "Phone": "555-0002"},
    ]
    wider = [row + [extra] for row, extra in zip(matrix, ["Cara", "555-0003"])]
    assert detect_transposed(wider) is True


def test_provider_email_maps_to_email_address():
    mapping = auto_map([TemplateField("Provider Email")], ["Email Address", "Phone"], {})
    assert mapping == {"Provider Email": "Email Address"}


def test_all_empty_header_row():
    with pytest.raises(NoHeadersError):
        build_records(parse(",,\nJane,1,2"))


def test_quoted_empty_field_is_kept():
    assert parse('a,"",b') == [["a", "", "b"]]


def test_standard_records_keep_header_order():
    rs = normalize_matrix(parse("Zip,Name,Email\n12345,Jane,j@x.io\n54321,Bob,b@x.io"))
    assert all(list(r.keys()) == ["Zip", "Name", "Email"] for r in rs.records)
