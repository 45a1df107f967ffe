from review_radar.extraction.normalizer import (
    MAX_TITLE_LENGTH,
    collapse_whitespace,
    normalize_title,
    strip_price_fragments,
    strip_sku_suffix,
)


def test_collapse_whitespace() -> None:
    assert collapse_whitespace("  Sony \n\t WH-1000XM4  ") == "Sony WH-1000XM4"


def test_strip_price_fragments_removes_prices_and_discounts() -> None:
    assert strip_price_fragments("Kettle $29.99 (20% off) Steel") == "Kettle Steel"
    assert strip_price_fragments("Kettle $30") == "Kettle"


def test_strip_sku_suffix_removes_repeated_tokens() -> None:
    assert strip_sku_suffix("Desk Lamp #A12 (LMP400)") == "Desk Lamp"
    assert strip_sku_suffix("Desk Lamp (Black Edition)") == "Desk Lamp (Black Edition)"


def test_normalize_title_pipeline() -> None:
    raw = "  Sony   WH-1000XM4 Headphones $348.00 (15% Off) #B0863TXGM3 "
    assert normalize_title(raw) == "Sony WH-1000XM4 Headphones"


def test_normalize_title_truncates_long_titles() -> None:
    title = normalize_title("word " * 60)
    assert len(title) == MAX_TITLE_LENGTH + 3
    assert title.endswith("...")


def test_normalize_title_is_idempotent() -> None:
    samples = [
        "Sony WH-1000XM4 Wireless Noise Canceling Headphones",
        "Kettle $29.99 Steel #K100",
        "x" * 400,
        "Gadget " * 40,
        "Chair (Oak) (C12)",
    ]
    for raw in samples:
        once = normalize_title(raw)
        assert normalize_title(once) == once


def test_normalize_title_empty() -> None:
    assert normalize_title("") == ""
    assert normalize_title("   ") == ""
