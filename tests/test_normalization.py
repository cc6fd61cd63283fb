import math

import pandas as pd
import pytest

from leads_etl.common import read_csv_with_optional_header, warn_missing
from leads_etl.normalization import (
    coerce_to_string,
    extract_domain,
    phone_digits,
    split_full_name,
    strip_phone_dots,
)


def test_warn_missing(tmp_path):
    missing = tmp_path / "nope.csv"
    assert warn_missing(str(missing), "Test") is True
    assert warn_missing(None, "Test") is True
    present = tmp_path / "here.csv"
    present.write_text("A\n1\n", encoding="utf-8")
    assert warn_missing(str(present), "Test") is False


def test_coerce_to_string_handles_nan():
    assert coerce_to_string(float("nan")) == ""
    assert coerce_to_string(None) == ""
    assert coerce_to_string("  x ") == "x"
    assert coerce_to_string(42) == "42"


def test_read_csv_with_optional_header(tmp_path):
    content = "\n".join(
        [
            "Exported from directory scrape",
            "",
            "Contact Full Name,Organization,Website",
            "David Gordon,Aspire Fine Homes,aspire.com",
            "",
        ]
    )
    path = tmp_path / "scrape.csv"
    path.write_text(content, encoding="utf-8")
    df = read_csv_with_optional_header(str(path), header_starts_with="Contact Full Name")
    assert isinstance(df, pd.DataFrame)
    assert df.iloc[0]["Organization"] == "Aspire Fine Homes"
    assert df.attrs["header_line"] == 3


def test_read_csv_keeps_blank_lines_as_rows(tmp_path):
    path = tmp_path / "gappy.csv"
    path.write_text("Organization,Website\nA,a.com\n\nB,b.com\n", encoding="utf-8")
    df = read_csv_with_optional_header(str(path))
    assert df.attrs["header_line"] == 1
    assert list(df["Organization"].fillna("")) == ["A", "", "B"]


def test_split_full_name_midpoint():
    assert split_full_name("Mary Jane Watson Parker") == ("Mary Jane", "Watson Parker")
    assert split_full_name("Jean  Luc   Picard") == ("Jean Luc", "Picard")
    assert split_full_name("David Gordon") == ("David", "Gordon")


def test_split_full_name_degenerate_inputs():
    assert split_full_name("") == ("", "")
    assert split_full_name("   ") == ("", "")
    assert split_full_name("  Cher ") == ("Cher", "")


@pytest.mark.parametrize("count", [2, 3, 4, 5, 7])
def test_split_full_name_token_counts(count):
    name = " ".join(f"T{i}" for i in range(count))
    first, last = split_full_name(name)
    assert len(first.split()) == math.ceil(count / 2)
    assert len(last.split()) == count // 2


def test_extract_domain():
    assert extract_domain("https://www.aspire.com/about?ref=1") == "aspire"
    assert extract_domain("http://coolair.net") == "coolair"
    assert extract_domain("info@polarheating.biz") == "polarheating"
    assert extract_domain("WWW.Example.Org/contact") == "example"
    assert extract_domain("shop.example.co.uk") == "shop.example.co.uk"
    assert extract_domain("") == ""


def test_extract_domain_strips_single_suffix():
    assert extract_domain("acme.co.us") == "acme.co"


def test_phone_helpers():
    assert strip_phone_dots(" 555.123.4567 ") == "5551234567"
    assert strip_phone_dots("(555) 123-4567") == "(555) 123-4567"
    assert phone_digits("(555) 123-4567 ext. 2") == "55512345672"
