from storefront.utils.templating import (
    CheckoutMessageContext,
    format_payment_proof,
    format_user_data,
    render_template,
)


def make_context(**fields):
    values = dict(
        product_name="Mobile Legends",
        category_name="Game",
        package_name="86 Diamonds",
        price="100.000",
    )
    values.update(fields)
    return CheckoutMessageContext(**values)


def test_every_occurrence_is_substituted():
    template = "{product_name} - {package_name} ({product_name})"
    assert render_template(template, make_context()) == "Mobile Legends - 86 Diamonds (Mobile Legends)"


def test_unknown_placeholders_are_left_alone():
    template = "Hi {customer} {product_name} {}"
    assert render_template(template, make_context()) == "Hi {customer} Mobile Legends {}"


def test_values_are_not_reinterpreted_as_placeholders():
    context = make_context(product_name="{price}")
    assert render_template("{product_name}", context) == "{price}"


def test_optional_values_default_to_empty():
    assert render_template("[{user_data}][{payment_proof}]", make_context()) == "[][]"


def test_format_user_data_lines():
    assert format_user_data({"user_id": "12345", "server_id": "678"}) == "*user_id:* 12345\n*server_id:* 678"
    assert format_user_data(None) == ""


def test_format_payment_proof():
    assert format_payment_proof("/uploads/image-1.png") == "*Bukti Pembayaran:* /uploads/image-1.png"
    assert format_payment_proof("") == ""
