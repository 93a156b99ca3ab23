from conference_pricing.engine import PricingConfig
from conference_pricing.engine.price_matrix import build_price_matrix, matrix_columns, matrix_records


def test_matrix_lists_every_priced_category(config):
    df = build_price_matrix(config)

    assert list(df.index) == ["standard", "student", "vip"]
    assert list(df.columns) == matrix_columns()
    assert df.index.name == "Category"


def test_matrix_prices(config):
    df = build_price_matrix(config)

    assert df.loc["standard", "EARLY_BIRD_Net"] == 150.0
    assert df.loc["standard", "EARLY_BIRD_Gross"] == 187.5
    assert df.loc["student", "LATE_Gross"] == 225.0
    assert df.loc["vip", "REGULAR_Net"] == 350.0
    assert df.loc["vip", "Name"] == "VIP Member"


def test_student_row_skipped_without_student_prices():
    config = PricingConfig.from_dict({"regular": {"amount": 100}})
    df = build_price_matrix(config, vat_fallback=10)

    assert list(df.index) == ["standard"]
    assert df.loc["standard", "REGULAR_Gross"] == 110.0


def test_matrix_records(config):
    records = matrix_records(build_price_matrix(config))

    assert records[0]["Category"] == "standard"
    assert records[0]["Name"] == "Standard"
    assert records[2]["LATE_Gross"] == 500.0
