"""Unit tests for request body sanitization."""

from typing import Optional

import pytest
from libs.common.sanitization import (
    PhoneStr,
    SanitizedList,
    SanitizedStr,
    sanitize_phone,
    sanitize_text,
)
from pydantic import BaseModel


class Sample(BaseModel):
    name: SanitizedStr
    tags: SanitizedList = []
    phone: Optional[PhoneStr] = None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("<b>Bold</b> text", "Bold text"),
        ("<script>alert('x')</script>Hello", "Hello"),
        ("<style>p {}</style>Body", "Body"),
        ("Fish &amp; Chips", "Fish & Chips"),
        ("  padded\x00\x07 ", "padded"),
        ("line\nbreak", "line\nbreak"),
    ],
)
def test_sanitize_text(raw, expected):
    assert sanitize_text(raw) == expected


def test_sanitize_text_none():
    assert sanitize_text(None) is None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("+44 (0) 20-7946 0958", "+4402079460958"),
        ("020 7946 0958", "02079460958"),
        ("12+34", "1234"),
        ("++1 555", "+1555"),
    ],
)
def test_sanitize_phone(raw, expected):
    assert sanitize_phone(raw) == expected


def test_annotated_types_clean_model_fields():
    sample = Sample(
        name="<i>Riverside</i> RC",
        tags=["<b>rowing</b>", " kayak "],
        phone="+1 (555) 010-2000",
    )
    assert sample.name == "Riverside RC"
    assert sample.tags == ["rowing", "kayak"]
    assert sample.phone == "+15550102000"
