import json
import logging

from app.logging_config import JsonFormatter
from app.prompts import build_prompt
from app.utils import host_from_address


def test_host_from_address_splits_port():
    assert host_from_address("10.0.0.5:8080") == "10.0.0.5"
    assert host_from_address("example.internal:443") == "example.internal"


def test_host_from_address_bracketed_ipv6():
    assert host_from_address("[2001:db8::1]:9000") == "2001:db8::1"


def test_host_from_address_falls_back_to_raw():
    assert host_from_address("localhost") == "localhost"
    assert host_from_address("::1") == "::1"
    assert host_from_address("[::1]") == "[::1]"
    assert host_from_address("[::1") == "[::1"


def test_prompt_with_json_schema_embeds_structure():
    prompt = build_prompt('  {"name": ""}  ', has_file=True)

    assert "Required JSON structure:\n{\"name\": \"\"}\n" in prompt
    assert "Read the PDF content" in prompt


def test_prompt_with_field_list_without_file():
    prompt = build_prompt("name, dob", has_file=False)

    assert "Required fields to extract: name, dob" in prompt
    assert "using null for unavailable data" in prompt
    assert "Required JSON structure" not in prompt


def test_prompt_without_schema_asks_for_content_values():
    prompt = build_prompt(None, has_file=True)

    assert prompt.startswith("IMPORTANT: Extract meaningful data from the PDF")
    assert prompt.endswith("Analyze the PDF and return only the extracted content values.\n")


def test_json_formatter_includes_request_fields():
    record = logging.LogRecord("app.middleware", logging.INFO, __file__, 1, "rate limit exceeded", None, None)
    record.client_key = "203.0.113.7"
    record.status = 429
    record.retry_after = 7.5

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["client_key"] == "203.0.113.7"
    assert payload["status"] == 429
    assert payload["retry_after"] == 7.5
    assert "path" not in payload
