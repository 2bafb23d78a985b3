import pytest

from pitch_extraction.extraction import ExtractionFacade, MemoField, MemoRequest, parse_quick_paste
from pitch_extraction.extraction.memo_parser import MemoParser


ALL_MEMO_FIELDS = {f.value for f in MemoField}


def parse(text):
    return ExtractionFacade().extract(MemoRequest(text=text))


def test_full_memo(sample_memo):
    result = parse(sample_memo)

    assert result["failedToParse"] == []
    assert result["extractedData"] == {
        "name": "Acme Robotics",
        "slug": "acme-robotics",
        "investment_date": "2025-06-27",
        "investment_amount": 250000,
        "instrument": "safe_post",
        "round_size_usd": 2000000,
        "stage_at_investment": "pre_seed",
        "conversion_cap_usd": 12000000,
        "discount_percent": 20,
        "post_money_valuation": 15000000,
        "has_pro_rata_rights": True,
        "country_of_incorp": "US",
        "incorporation_type": "c_corp",
        "reason_for_investing": "Strong team with prior exits.\nLarge market.",
        "co_investors": ["Precursor Ventures", "Hustle Fund"],
        "founder_name": "Jane Doe",
        "founder_role": "cofounder",
        "description_raw": "Acme builds warehouse robots.",
    }
    assert result["successfullyParsed"] == [f.value for f in MemoField]


def test_single_amount_line():
    result = parse("Investment Amount: $250,000")

    assert result["extractedData"] == {"investment_amount": 250000}
    assert result["successfullyParsed"] == ["investment_amount"]
    assert "has_pro_rata_rights" in result["failedToParse"]
    assert "name" in result["failedToParse"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "garbage\n\n:::\n- \n",
        "Investment Amount: $250,000",
        "Pro-rata rights: maybe\nDiscount: 250%\nCountry of Incorporation: Atlantis",
        "Investment in \nCompleted on someday.",
        "Company Name:\nBeta Labs\nFounders: n/a",
    ]
)
def test_every_field_lands_in_exactly_one_list(text, sample_memo):
    for memo in (text, sample_memo + text):
        result = parse(memo)
        succeeded = set(result["successfullyParsed"])
        failed = set(result["failedToParse"])

        assert succeeded | failed == ALL_MEMO_FIELDS
        assert not succeeded & failed
        assert set(result["extractedData"]) == succeeded


def test_none_input_fails_every_field():
    result = parse_quick_paste(None).to_dict()

    assert result["extractedData"] == {}
    assert result["failedToParse"] == [f.value for f in MemoField]


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Investing in SAFE (post-money)", "safe_post"),
        ("Investing in SAFE (pre-money)", "safe_pre"),
        ("Instrument: Convertible Note", "convertible_note"),
        ("Instrument Type - Priced equity round", "equity"),
    ]
)
def test_instrument(line, expected):
    assert parse(line)["extractedData"]["instrument"] == expected


def test_unknown_instrument_fails():
    result = parse("Instrument: Handshake")

    assert "instrument" in result["failedToParse"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("United States", "US"),
        ("USA", "US"),
        ("UK", "GB"),
        ("Canada", "CA"),
        ("de", "DE"),
    ]
)
def test_country_of_incorporation(value, expected):
    assert parse(f"Country of Incorporation: {value}")["extractedData"]["country_of_incorp"] == expected


def test_unknown_country_fails():
    assert "country_of_incorp" in parse("Country of Incorporation: Atlantis")["failedToParse"]


def test_pro_rata_no_is_a_parsed_value():
    result = parse("Pro-rata rights: No")

    assert result["extractedData"]["has_pro_rata_rights"] is False
    assert "has_pro_rata_rights" in result["successfullyParsed"]


def test_co_investors_block():
    result = parse("Co-Investors:\nFund A\nFund B, Fund C\n\nDescription\nSomething")

    assert result["extractedData"]["co_investors"] == ["Fund A", "Fund B", "Fund C"]
    assert result["extractedData"]["description_raw"] == "Something"


def test_co_investors_placeholder_fails():
    assert "co_investors" in parse("Co-Investors: None")["failedToParse"]


def test_block_stops_at_next_label():
    result = parse("Reason for Investing: Great founders\nCountry of Incorporation: Canada")

    assert result["extractedData"]["reason_for_investing"] == "Great founders"
    assert result["extractedData"]["country_of_incorp"] == "CA"


def test_company_name_label_and_slug():
    result = parse("Company Name:\nBeta Labs, Inc.")

    assert result["extractedData"]["name"] == "Beta Labs, Inc"
    assert result["extractedData"]["slug"] == "beta-labs-inc"


def test_labelled_investment_date():
    result = parse("- Investment Date: March 1, 2025")

    assert result["extractedData"]["investment_date"] == "2025-03-01"


def test_discount_out_of_range_fails():
    assert "discount_percent" in parse("Discount: 250%")["failedToParse"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Delaware C-Corp", "c_corp"),
        ("LLC", "llc"),
        ("Public Benefit Corporation", "bcorp"),
        ("Private Limited Company", "ltd"),
    ]
)
def test_incorporation_type(value, expected):
    assert parse(f"Type of Incorporation: {value}")["extractedData"]["incorporation_type"] == expected


def test_failing_rule_does_not_affect_other_fields(mocker, sample_memo):
    mocker.patch.object(MemoParser, "coerce_country", side_effect=RuntimeError("lookup down"))

    result = parse(sample_memo)

    assert "country_of_incorp" in result["failedToParse"]
    assert result["extractedData"]["investment_amount"] == 250000
    assert len(result["successfullyParsed"]) == len(ALL_MEMO_FIELDS) - 1


@pytest.mark.parametrize(
    "text",
    [
        "Company Name:\nInvestment Amount: $250,000",
        "Company Name:\n\n- Round Size: $2M",
    ]
)
def test_bare_company_label_does_not_take_next_label_as_name(text):
    result = parse(text)

    assert "name" in result["failedToParse"]
    assert "slug" in result["failedToParse"]


def test_bare_founders_label_does_not_take_role_line():
    result = parse("Founders:\nFounder Role: Co-Founder")

    assert "founder_name" in result["failedToParse"]
    assert result["extractedData"]["founder_role"] == "cofounder"


def test_prose_starting_with_label_word_stays_in_block():
    result = parse("Founders: Jane Doe\n\nReason for Investing\nStage of the market is early and growing.\n")

    assert result["extractedData"]["reason_for_investing"] == "Stage of the market is early and growing."
    assert result["extractedData"]["founder_name"] == "Jane Doe"


def test_free_text_label_needs_separator():
    result = parse("Description of the deal follows later.\nDescription: Robots for warehouses.")

    assert result["extractedData"]["description_raw"] == "Robots for warehouses."


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Yes, no cap on follow-on", True),
        ("No, not offered this round", False),
        ("Not included", False),
        ("Included", True),
    ]
)
def test_pro_rata_first_answer_word_wins(value, expected):
    assert parse(f"Pro-rata rights: {value}")["extractedData"]["has_pro_rata_rights"] is expected
