from __future__ import annotations

import pytest

from packages.contracts.errors import OcrFormatError, OcrProviderError
from packages.perception.ocr import parse_annotation, select_language
from tests.fixtures.sample_data import block, vision_response, word


def test_words_are_numbered_in_traversal_order() -> None:
    body = vision_response(
        [
            block([word("Hello"), word("world")], paragraphs=2),
            block([word("Press"), word("Start")], block_type="TABLE"),
        ]
    )
    result = parse_annotation(body)
    assert [w.text for w in result.words] == ["Hello", "world", "Press", "Start"]
    assert [w.id for w in result.words] == [0, 1, 2, 3]


def test_non_text_blocks_contribute_no_words() -> None:
    body = vision_response(
        [
            block([word("A")]),
            block([word("logo")], block_type="PICTURE"),
            block([word("rule")], block_type="RULER"),
            block([word("B")]),
        ]
    )
    result = parse_annotation(body)
    assert [w.text for w in result.words] == ["A", "B"]
    assert [w.id for w in result.words] == [0, 1]


def test_symbols_concatenate_and_box_is_copied() -> None:
    body = vision_response([block([word("Hi", x=5, y=7)])])
    only = parse_annotation(body).words[0]
    assert only.text == "Hi"
    assert [(v.x, v.y) for v in only.bounding_box] == [(5, 7), (25, 7), (25, 17), (5, 17)]


def test_missing_vertex_coordinates_default_to_zero() -> None:
    raw = word("x")
    raw["boundingBox"]["vertices"][0] = {}
    result = parse_annotation(vision_response([block([raw])]))
    assert (result.words[0].bounding_box[0].x, result.words[0].bounding_box[0].y) == (0, 0)


def test_language_is_first_listed_candidate() -> None:
    languages = [
        {"languageCode": "en", "confidence": 0.2},
        {"languageCode": "ja", "confidence": 0.7},
    ]
    assert parse_annotation(vision_response([], languages)).detected_language == "en"


def test_language_ties_keep_provider_order() -> None:
    assert select_language([{"languageCode": "fr"}, {"languageCode": "de"}]) == "fr"


def test_empty_language_list_is_format_error() -> None:
    with pytest.raises(OcrFormatError):
        select_language([])


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"responses": []},
        {"responses": [{}]},
        {"responses": [{"fullTextAnnotation": {}}]},
        {"responses": [{"fullTextAnnotation": {"pages": []}}]},
        {"responses": [{"fullTextAnnotation": {"pages": [{"blocks": []}]}}]},
        {"responses": [{"fullTextAnnotation": {"pages": [{"property": {}}]}}]},
    ],
)
def test_missing_structure_is_format_error(body) -> None:
    with pytest.raises(OcrFormatError):
        parse_annotation(body)


def test_malformed_bounding_box_is_format_error() -> None:
    raw = word("x")
    raw["boundingBox"]["vertices"] = raw["boundingBox"]["vertices"][:2]
    with pytest.raises(OcrFormatError):
        parse_annotation(vision_response([block([raw])]))


def test_provider_error_inside_response_is_reported() -> None:
    body = {"responses": [{"error": {"code": 7, "message": "API key not valid"}}]}
    with pytest.raises(OcrProviderError) as excinfo:
        parse_annotation(body)
    assert "API key not valid" in str(excinfo.value)
