from leads_etl.dedupe import composite_key, dedupe_fields, dedupe_rows
from leads_etl.models import ContactRow


def _gordon(row_number, company="Aspire Fine Homes", **extra):
    return ContactRow(
        source_row=row_number,
        full_name="David Gordon",
        company_cleaned=company,
        website="aspire.com",
        **extra,
    )


def test_dedupe_rows_drops_repeated_key():
    rows = [_gordon(2), _gordon(3, primary_email="other@aspire.com")]
    kept = dedupe_rows(rows)
    assert [row.source_row for row in kept] == [2]
    # first occurrence wins, nothing is merged from the dropped row
    assert kept[0].primary_email == ""


def test_dedupe_rows_keeps_distinct_company():
    rows = [_gordon(2), _gordon(3, company="Whitestone Builders")]
    assert len(dedupe_rows(rows)) == 2


def test_composite_key_is_trimmed_and_lowercased():
    a = ContactRow(full_name=" David Gordon ", company_cleaned="ASPIRE fine homes", website="Aspire.com")
    b = _gordon(3)
    assert composite_key(a) == composite_key(b) == "david gordon|aspire fine homes|aspire.com"


def test_composite_key_uses_cleaned_company_only():
    row = ContactRow(full_name="David Gordon", organization="Aspire Fine Homes", website="aspire.com")
    assert composite_key(row) == "david gordon||aspire.com"
    assert composite_key(row) != composite_key(_gordon(2))


def test_organization_does_not_stand_in_for_cleaned_company():
    rows = [
        ContactRow(source_row=2, full_name="Ann Lee", organization="Acme", website="acme.com"),
        ContactRow(
            source_row=3,
            full_name="Ann Lee",
            company_cleaned="Acme",
            organization="Acme Corp",
            website="acme.com",
        ),
    ]
    assert [row.source_row for row in dedupe_rows(rows)] == [2, 3]


def test_partial_keys_collide():
    rows = [
        ContactRow(source_row=2, full_name="", company_cleaned="Acme", website=""),
        ContactRow(source_row=3, full_name="", company_cleaned="acme", website=""),
    ]
    assert [row.source_row for row in dedupe_rows(rows)] == [2]


def test_dedupe_rows_is_idempotent_and_stable():
    rows = [
        _gordon(2),
        ContactRow(source_row=3, full_name="Ann Lee", company_cleaned="Polar Air", website="polarair.com"),
        _gordon(4),
        _gordon(5, company="Whitestone Builders"),
        ContactRow(source_row=6, full_name="ann lee", company_cleaned="POLAR AIR", website="polarair.com"),
    ]
    once = dedupe_rows(rows)
    assert [row.source_row for row in once] == [2, 3, 5]
    assert dedupe_rows(once) == once


def test_dedupe_fields_clears_later_repeats_case_insensitively():
    row = ContactRow(
        primary_email="Sales@Acme.com",
        email_1="sales@acme.com ",
        email_2="owner@acme.com",
        personal_email="SALES@ACME.COM",
    )
    cleaned = dedupe_fields(row)
    assert cleaned.primary_email == "Sales@Acme.com"
    assert cleaned.email_1 == ""
    assert cleaned.email_2 == "owner@acme.com"
    assert cleaned.personal_email == ""


def test_dedupe_fields_covers_phone_slots_and_trims_kept_values():
    row = ContactRow(
        contact_phone_1=" 555-0100 ",
        company_phone_1="555-0100",
        company_phone_2="555-0199",
        contact_mobile_phone="555-0199",
    )
    cleaned = dedupe_fields(row)
    assert cleaned.contact_phone_1 == "555-0100"
    assert cleaned.company_phone_1 == ""
    assert cleaned.company_phone_2 == "555-0199"
    assert cleaned.contact_mobile_phone == ""


def test_dedupe_fields_leaves_business_columns_alone():
    row = ContactRow(
        organization="sales@acme.com",
        website="sales@acme.com",
        description="sales@acme.com",
        city="sales@acme.com",
        primary_email="sales@acme.com",
    )
    cleaned = dedupe_fields(row)
    assert cleaned.organization == "sales@acme.com"
    assert cleaned.website == "sales@acme.com"
    assert cleaned.description == "sales@acme.com"
    assert cleaned.city == "sales@acme.com"
    assert cleaned.primary_email == "sales@acme.com"


def test_dedupe_fields_ignores_blank_values():
    row = ContactRow(primary_email="   ", email_1="   ", email_2="a@x.com")
    cleaned = dedupe_fields(row)
    assert cleaned.primary_email == "   "
    assert cleaned.email_1 == "   "
    assert cleaned.email_2 == "a@x.com"
