"""Tests for phase configuration."""

import json

import pytest

from study_lifecycle.errors import PhaseConfigError
from study_lifecycle.phases import DAY_MS, DEFAULT_PHASES, Phase, load_phases, parse_phases, study_length_ms


class TestParsePhases:
    """Phase configuration parsing."""

    def test_object_form(self):
        """Objects keyed by name keep their order."""
        phases = parse_phases({"a": {"duration": 5}, "b": {"duration": 7}})

        assert phases == (Phase("a", 5), Phase("b", 7))

    def test_list_form(self):
        """Lists of named objects are accepted."""
        phases = parse_phases([{"name": "a", "duration": 5}, {"name": "b"}])

        assert phases == (Phase("a", 5), Phase("b", 0))

    def test_missing_duration_counts_zero(self):
        """Phases without a duration add nothing to the study length."""
        phases = parse_phases({"a": {"duration": 5}, "open": {"message": "thanks"}})

        assert study_length_ms(phases) == 5

    @pytest.mark.parametrize("duration", [-1, "5", 1.5, True])
    def test_invalid_duration(self, duration):
        """Negative or non-integer durations are rejected."""
        with pytest.raises(PhaseConfigError):
            parse_phases({"a": {"duration": duration}})

    @pytest.mark.parametrize("data", ["phases", 3, [{"duration": 5}], {"a": 5}])
    def test_invalid_structure(self, data):
        """Malformed structures are rejected."""
        with pytest.raises(PhaseConfigError):
            parse_phases(data)


class TestLoadPhases:
    """Loading phases from disk."""

    def test_default_phases(self):
        """No file means the built-in 30-day study."""
        assert load_phases(None) == DEFAULT_PHASES
        assert study_length_ms(DEFAULT_PHASES) == 30 * DAY_MS

    def test_from_file(self, temp_dir):
        """Phases load from a JSON file."""
        path = temp_dir / "phases.json"
        path.write_text(json.dumps({"only": {"duration": DAY_MS}}))

        assert load_phases(path) == (Phase("only", DAY_MS),)

    def test_invalid_json(self, temp_dir):
        """Invalid JSON is a configuration error."""
        path = temp_dir / "phases.json"
        path.write_text("{")

        with pytest.raises(PhaseConfigError):
            load_phases(path)

    def test_missing_file(self, temp_dir):
        """A configured but missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_phases(temp_dir / "missing.json")
