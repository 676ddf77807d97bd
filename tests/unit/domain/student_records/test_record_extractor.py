"""Unit tests for row matching and category extraction."""

import pytest

from student_hours.domain.student_records.header_classifier import classify_headers
from student_hours.domain.student_records.record_extractor import (
    RecordExtractor,
    extract_record,
    find_matching_rows,
    is_meaningful_value,
    row_matches,
)

HEADERS = [
    "COD",
    "Nombre",
    "Revisiones pendientes cocurriculares",
    "Taller X",
    "Revisiones pendientes liderazgo",
    "Taller Y",
]


class FakeAnnotations:
    """Annotation source keyed by 0-based (column, sheet row)."""

    def __init__(self, notes):
        self.notes = notes
        self.calls = []

    def get_annotation(self, column_index, row_index):
        self.calls.append((column_index, row_index))
        return self.notes.get((column_index, row_index), "")


@pytest.fixture
def layout():
    return classify_headers(HEADERS)


class TestRowMatches:
    @pytest.mark.unit
    def test_exact_match_after_trimming(self, layout):
        assert row_matches(["  12345 ", "Ana"], layout, "12345")
        assert row_matches(["12345", "Ana"], layout, " 12345 ")

    @pytest.mark.unit
    def test_case_sensitive(self, layout):
        assert not row_matches(["abc1", "Ana"], layout, "ABC1")

    @pytest.mark.unit
    def test_partial_does_not_match(self, layout):
        assert not row_matches(["123456", "Ana"], layout, "12345")

    @pytest.mark.unit
    def test_short_row_never_matches(self):
        layout = classify_headers(["Nombre", "COD"])

        assert not row_matches(["Ana"], layout, "Ana")

    @pytest.mark.unit
    def test_find_matching_rows_returns_every_match(self, layout):
        rows = [["1", "A"], ["2", "B"], [], ["1", "C"]]

        assert find_matching_rows(rows, layout, "1") == [0, 3]


class TestIsMeaningfulValue:
    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["", "   ", "-", "/", "0", "0.0", " 0 ", None])
    def test_placeholders_are_ignored(self, value):
        assert not is_meaningful_value(value, ["-", "/"])

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["3", "0.5", "x", "Pendiente", "-2"])
    def test_values_are_kept(self, value):
        assert is_meaningful_value(value, ["-", "/"])


class TestExtractRecord:
    @pytest.mark.unit
    def test_splits_row_into_categories(self, layout):
        row = ["12345", "Ana", "", "3", "", "2"]

        cocurriculares, liderazgo = extract_record(row, 0, layout, HEADERS)

        assert cocurriculares == {"Taller X": "3"}
        assert liderazgo == {"Taller Y": "2"}

    @pytest.mark.unit
    def test_placeholders_omitted(self, layout):
        row = ["12345", "Ana", "-", "0", "/", ""]

        assert extract_record(row, 0, layout, HEADERS) == ({}, {})

    @pytest.mark.unit
    def test_annotation_appended_to_pending_review_key(self, layout):
        row = ["12345", "Ana", "1", "3", "", ""]
        annotations = FakeAnnotations({(2, 5): "Falta informe"})

        cocurriculares, _ = extract_record(row, 4, layout, HEADERS, annotations)

        assert cocurriculares == {
            "Revisiones pendientes cocurriculares - Falta informe": "1",
            "Taller X": "3",
        }
        # data row 4 sits on sheet row 5 (row 0 holds the headers)
        assert annotations.calls == [(2, 5)]

    @pytest.mark.unit
    def test_annotation_row_shifts_with_header_row(self, layout):
        row = ["12345", "Ana", "1", "", "", ""]
        annotations = FakeAnnotations({(2, 4): "Sin acta"})

        cocurriculares, _ = extract_record(
            row, 1, layout, HEADERS, annotations, header_row=2
        )

        assert cocurriculares == {"Revisiones pendientes cocurriculares - Sin acta": "1"}
        # headers on sheet row 2, so data row 1 sits on sheet row 4
        assert annotations.calls == [(2, 4)]

    @pytest.mark.unit
    def test_pending_review_without_annotation_keeps_header(self, layout):
        row = ["12345", "Ana", "1", "", "", ""]

        cocurriculares, _ = extract_record(row, 0, layout, HEADERS, FakeAnnotations({}))

        assert cocurriculares == {"Revisiones pendientes cocurriculares": "1"}

    @pytest.mark.unit
    def test_regular_headers_never_consult_annotations(self, layout):
        row = ["12345", "Ana", "", "3", "", "2"]
        annotations = FakeAnnotations({(3, 1): "ignored"})

        extract_record(row, 0, layout, HEADERS, annotations)

        assert annotations.calls == []

    @pytest.mark.unit
    def test_duplicate_keys_last_write_wins(self):
        headers = ["COD", "Revisiones pendientes cocurriculares", "Taller", "Taller"]
        layout = classify_headers(headers)
        row = ["12345", "", "2", "5"]

        cocurriculares, _ = extract_record(row, 0, layout, headers)

        assert cocurriculares == {"Taller": "5"}

    @pytest.mark.unit
    def test_empty_headers_and_short_rows_skipped(self):
        headers = ["COD", "Revisiones pendientes cocurriculares", "", "Taller X", "Taller Z"]
        layout = classify_headers(headers)
        row = ["12345", "", "9", "4"]

        cocurriculares, liderazgo = extract_record(row, 0, layout, headers)

        assert cocurriculares == {"Taller X": "4"}
        assert liderazgo == {}

    @pytest.mark.unit
    def test_custom_ignored_values(self, layout):
        extractor = RecordExtractor(ignored_values=["N/A"])
        row = ["12345", "Ana", "", "N/A", "", "-"]

        cocurriculares, liderazgo = extractor.extract(row, 0, layout, HEADERS)

        assert cocurriculares == {}
        assert liderazgo == {"Taller Y": "-"}
