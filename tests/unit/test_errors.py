"""Tests for submission error message extraction."""

from __future__ import annotations

import json

from tenantforms.core.exceptions import DataSourceError
from tenantforms.wizard.errors import FALLBACK_MESSAGE, extract_error_message


class TestStructuredMessages:
    def test_server_messages_json_list(self):
        body = {
            "_server_messages": json.dumps([
                json.dumps({"message": "Item Name is mandatory"}),
                json.dumps({"message": "SKU already exists"}),
            ]),
            "message": "less specific",
        }
        assert extract_error_message(DataSourceError("failed", body=body)) == (
            "Item Name is mandatory; SKU already exists"
        )

    def test_errors_list_deduplicated(self):
        body = {"errors": ["Email is invalid", "Email is invalid", {"message": "Phone is invalid"}]}
        assert extract_error_message(body) == "Email is invalid; Phone is invalid"

    def test_axios_style_wrapper(self):
        error = {"response": {"data": {"message": "Duplicate employee"}}}
        assert extract_error_message(error) == "Duplicate employee"


class TestFallbacks:
    def test_single_message(self):
        assert extract_error_message({"message": "Bad request"}) == "Bad request"

    def test_error_field(self):
        assert extract_error_message({"error": "Unauthorized"}) == "Unauthorized"

    def test_exception_text(self):
        assert extract_error_message(RuntimeError("connection reset")) == "connection reset"

    def test_data_source_error_without_body_uses_its_message(self):
        assert extract_error_message(DataSourceError("Gateway timeout")) == "Gateway timeout"

    def test_nothing_usable(self):
        assert extract_error_message(RuntimeError()) == FALLBACK_MESSAGE
        assert extract_error_message(None) == FALLBACK_MESSAGE
        assert extract_error_message({"message": "   "}) == FALLBACK_MESSAGE


class TestCleanup:
    def test_html_tags_stripped(self):
        assert extract_error_message({"message": "<b>Row 2</b>: invalid <i>price</i>"}) == (
            "Row 2: invalid price"
        )

    def test_export_country_with_c1(self):
        message = extract_error_message({"message": "destnCountryCd is required for tax code C1"})
        assert message == "Export To Country is required when using Tax Code C1."

    def test_export_country_renamed(self):
        message = extract_error_message({"message": "Invalid value (destnCountryCd)"})
        assert message == "Invalid value"
        message = extract_error_message({"message": "destnCountryCd must be 2 letters"})
        assert message == "Export To Country must be 2 letters"
