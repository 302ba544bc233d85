"""Tests for sanitizer and formatter modules."""

from datetime import date

from plexify.formatter import (
    clean_title,
    format_episode_code,
    format_movie_name,
    format_season_folder_name,
    format_tv_episode_name,
    format_tv_episode_name_date_based,
    format_tv_show_folder_name,
)
from plexify.sanitizer import sanitize


class TestSanitize:
    """Tests for sanitize function."""

    def test_replaces_invalid_characters(self):
        assert sanitize("Movie: Title?") == "Movie Title"

    def test_only_invalid_characters(self):
        assert sanitize("://?*|") == ""

    def test_collapses_whitespace(self):
        assert sanitize("  A   <B>  ") == "A B"

    def test_is_idempotent(self):
        for name in ("Movie: Title?", "a/b\\c", "  x  ", "100% Pure", 'Say "Hi"'):
            assert sanitize(sanitize(name)) == sanitize(name)

    def test_keeps_valid_punctuation(self):
        assert sanitize("Director's Cut & More!") == "Director's Cut & More!"


class TestCleanTitle:
    """Tests for clean_title function."""

    def test_strips_tag_block(self):
        assert clean_title("The Matrix (1999) {imdb-tt0133093}") == "The Matrix"

    def test_strips_trailing_year(self):
        assert clean_title("Alien 1979") == "Alien"

    def test_keeps_year_inside_title(self):
        assert clean_title("2001 A Space Odyssey") == "2001 A Space Odyssey"


class TestFormatMovieName:
    """Tests for format_movie_name function."""

    def test_full_name(self):
        assert format_movie_name("The Matrix", 1999, "tt0133093") == "The Matrix (1999) {imdb-tt0133093}"

    def test_without_year(self):
        assert format_movie_name("The Matrix", None, "tt0133093") == "The Matrix {imdb-tt0133093}"

    def test_without_external_id(self):
        assert format_movie_name("The Matrix", 1999) == "The Matrix (1999)"

    def test_with_edition(self):
        name = format_movie_name("Blade Runner", 1982, "tt0083658", "Final Cut")
        assert name == "Blade Runner (1982) {edition-Final Cut} {imdb-tt0083658}"

    def test_empty_edition_is_omitted(self):
        assert format_movie_name("Heat", 1995, None, "") == "Heat (1995)"

    def test_sanitizes_title(self):
        assert format_movie_name("Mission: Impossible", 1996) == "Mission Impossible (1996)"

    def test_does_not_double_tag(self):
        already = "The Matrix (1999) {imdb-tt0133093}"
        assert format_movie_name(already, 1999, "tt0133093") == already


class TestFormatTVNames:
    """Tests for the TV show, season and episode formatters."""

    def test_show_folder(self):
        assert format_tv_show_folder_name("Band of Brothers", 2001, "tt0185906") == (
            "Band of Brothers (2001) {imdb-tt0185906}"
        )

    def test_show_folder_title_only(self):
        assert format_tv_show_folder_name("Band of Brothers") == "Band of Brothers"

    def test_season_folder_is_zero_padded(self):
        assert format_season_folder_name(0) == "Season 00"
        assert format_season_folder_name(1) == "Season 01"
        assert format_season_folder_name(10) == "Season 10"

    def test_episode_code(self):
        assert format_episode_code(1, 2) == "s01e02"
        assert format_episode_code(12, 103) == "s12e103"

    def test_episode_name(self):
        name = format_tv_episode_name("Band of Brothers", 2001, 1, 1, "Currahee", "mkv")
        assert name == "Band of Brothers (2001) - s01e01 - Currahee.mkv"

    def test_episode_name_without_title_or_year(self):
        assert format_tv_episode_name("Show", None, 2, 5, None, "mp4") == "Show - s02e05.mp4"

    def test_episode_name_accepts_dotted_extension(self):
        assert format_tv_episode_name("Show", 2020, 1, 1, None, ".mkv") == "Show (2020) - s01e01.mkv"

    def test_episode_name_without_extension(self):
        assert format_tv_episode_name("Show", 2020, 1, 1, "Pilot", "") == "Show (2020) - s01e01 - Pilot"

    def test_episode_title_is_sanitized(self):
        name = format_tv_episode_name("Show", None, 1, 3, "Who? What?", "mkv")
        assert name == "Show - s01e03 - Who What.mkv"

    def test_date_based_episode_name(self):
        name = format_tv_episode_name_date_based(
            "The Daily Show", 1996, date(2020, 1, 15), "Guest Name", "mkv"
        )
        assert name == "The Daily Show (1996) - 2020-01-15 - Guest Name.mkv"

    def test_date_based_episode_name_without_title(self):
        name = format_tv_episode_name_date_based("News", None, date(2021, 3, 4), None, "ts")
        assert name == "News - 2021-03-04.ts"
