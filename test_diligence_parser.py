from pitch_extraction.extraction import ExtractionFacade, parse_diligence_blob


DILIGENCE_PAGE = (
    "Company Details\n"
    "Company Legal Name\n"
    "Acme Robotics, Inc.\n"
    "Company headquarters location\n"
    "1401 21ST STE R SACRAMENTO, CA 95811\n"
    "Current Founder 1:\n"
    "First name\n"
    "Jane\n"
    "Last name\n"
    "Doe\n"
    "Role\n"
    "CEO\n"
    "Current Founder 2:\n"
    "First name\n"
    "John\n"
    "Last name\n"
    "Roe\n"
    "Role\n"
    "CTO\n"
    "Log in to continue\n"
)


def test_company_and_founders():
    result = ExtractionFacade().extract_diligence(DILIGENCE_PAGE)

    assert result["legal_name"] == "Acme Robotics, Inc."
    assert result["hq_state"] == "CA"
    assert result["hq_zip_code"] == "95811"
    assert result["hq_country"] == "US"
    assert result["founders"] == [
        {"first_name": "Jane", "last_name": "Doe", "title": "CEO", "role": "cofounder"},
        {"first_name": "John", "last_name": "Roe", "title": "CTO", "role": "cofounder"},
    ]


def test_single_founder_role():
    text = "Current Founder 1:\nFirst name\nAda\nLast name\nLovelace\n"
    result = parse_diligence_blob(text)

    assert len(result.founders) == 1
    assert result.founders[0].role == "founder"
    assert result.founders[0].title == ""


def test_non_us_address_kept_whole():
    text = "Company headquarters location\n10 Downing Street, London\n"
    result = parse_diligence_blob(text).to_dict()

    assert result == {"hq_address_line_1": "10 Downing Street, London"}


def test_founder_block_without_names_is_skipped():
    text = "Current Founder 1:\nRole\nAdvisor\n"

    assert parse_diligence_blob(text).founders == []


def test_empty_input():
    assert parse_diligence_blob("").to_dict() == {}
    assert parse_diligence_blob(None).to_dict() == {}
