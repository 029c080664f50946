"""Tests for header/footer removal."""

from __future__ import annotations

from medlists.segmentation.boilerplate import filter_boilerplate, line_frequencies, normalize_line


class TestNormalizeLine:
    def test_collapses_whitespace_and_case(self):
        assert normalize_line("  Apple   HEALTH\tRecords ") == "apple health records"


class TestFilterBoilerplate:
    def test_drops_known_patterns(self):
        text = "\n".join([
            "Page 3",
            "17",
            "2025-10-27",
            "2025-10-27 10:15 AM",
            "Generated on Oct 27, 2025",
            "Exported on Oct 28, 2025",
            "Apple Health Records",
            "Aspirin 81 mg",
        ])
        assert filter_boilerplate(text) == "Aspirin 81 mg"

    def test_keeps_iso_date_followed_by_text(self):
        text = "2025-10-27 Aspirin 81 mg"
        assert filter_boilerplate(text) == text

    def test_drops_lines_repeated_more_than_threshold(self):
        header = "Jane Doe  DOB 01/01/1970"
        lines = []
        for dose in range(6):
            lines += [header, f"Aspirin {dose + 1} mg"]
        filtered = filter_boilerplate("\n".join(lines))
        assert header not in filtered
        assert filtered.splitlines() == [f"Aspirin {d} mg" for d in range(1, 7)]

    def test_threshold_is_exclusive(self):
        lines = ["Repeated line here"] * 5 + ["Other line"]
        assert filter_boilerplate("\n".join(lines)).count("Repeated line here") == 5

    def test_repeat_counting_ignores_case_and_spacing(self):
        lines = ["Chart  Summary", "chart summary", "CHART SUMMARY"] * 2
        assert filter_boilerplate("\n".join(lines), repeat_threshold=5) == ""

    def test_blank_lines_preserved(self):
        text = "Aspirin 81 mg\n\n   \nLisinopril 10 mg"
        assert filter_boilerplate(text) == text

    def test_order_preserved(self):
        text = "b line\na line\nPage 2\nc line"
        assert filter_boilerplate(text) == "b line\na line\nc line"

    def test_idempotent(self):
        text = "\n".join(
            ["Header Line"] * 7
            + ["Oct 27, 2025", "Aspirin 81 mg", "", "Page 4", "Metformin 500 mg"]
            + ["Mid repeat"] * 3
        )
        once = filter_boilerplate(text)
        assert filter_boilerplate(once) == once

    def test_custom_letterheads(self):
        text = "Acme Clinic Portal\nAspirin 81 mg"
        assert filter_boilerplate(text, letterhead_patterns=[r"^Acme\s+Clinic"]) == "Aspirin 81 mg"


def test_line_frequencies_skip_blank_lines():
    counts = line_frequencies(["a", " A ", "", "  ", "b"])
    assert counts == {"a": 2, "b": 1}
