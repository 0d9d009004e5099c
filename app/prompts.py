"""Prompt construction for document extraction requests."""
from __future__ import annotations

from typing import Optional

_BAD_EXAMPLE = '{"file": null, "pages": 1, "tables": [], "text": [...]}'


def build_prompt(schema: Optional[str], has_file: bool) -> str:
    """Build the instruction text sent ahead of the document.

    With a ``schema`` the model is asked for a flat object holding exactly the
    requested fields. A schema that looks like a JSON object is passed as the
    required structure; anything else is treated as a field list.
    """

    schema = (schema or "").strip()
    lines: list[str] = []
    if schema:
        lines += [
            "IMPORTANT: You must return ONLY a simple JSON object with the requested data fields.",
            "DO NOT return any structure with 'file', 'pages', 'tables', or 'text' keys.",
            "DO NOT return arrays of text chunks or metadata.",
            "Extract the actual data values and return them directly.",
            "",
            "Example of what NOT to return:",
            _BAD_EXAMPLE,
            "",
            "Example of correct format:",
            '{"name": "John Doe", "contact": "1234567890", "application_no": "ABC123"}',
            "",
        ]
        if schema.startswith("{"):
            lines += ["Required JSON structure:", schema, ""]
        else:
            lines += [f"Required fields to extract: {schema}", ""]
        if has_file:
            lines.append(
                "Read the PDF content and extract only the requested field values. "
                "Return the simple JSON object with extracted values only."
            )
        else:
            lines.append("Create a JSON object with the specified keys, using null for unavailable data.")
    else:
        lines += [
            "IMPORTANT: Extract meaningful data from the PDF as a simple JSON object.",
            "DO NOT return metadata like 'file', 'pages', 'tables', or 'text' arrays.",
            "DO NOT return document structure information.",
            "Extract actual content values like names, numbers, addresses, etc.",
            "",
            "Example of what NOT to return:",
            _BAD_EXAMPLE,
            "",
            "Example of correct format:",
            '{"document_type": "Application", "name": "John Doe", "id": "123456"}',
            "",
            "Analyze the PDF and return only the extracted content values.",
        ]
    return "\n".join(lines) + "\n"
