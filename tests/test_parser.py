"""Tests for parser and cleaner modules."""

from datetime import date
from pathlib import Path

from plexify.cleaner import clean_episode_title
from plexify.parser import (
    extract_title,
    extract_year,
    has_date_marker,
    has_episode_marker,
    is_season_folder_name,
    is_video_file,
    parse_air_date,
    parse_episode,
    parse_imdb_id,
    parse_leading_number,
    parse_season_episode,
    season_from_path,
)


class TestCleanEpisodeTitle:
    """Tests for clean_episode_title function."""

    def test_strips_separators_and_release_noise(self):
        assert clean_episode_title(".The.Pilot.1080p.WEB-DL[rarbg]") == "The Pilot"

    def test_removes_parenthesised_groups(self):
        assert clean_episode_title(" - Title (2019) [group]") == "Title"

    def test_only_noise_is_none(self):
        assert clean_episode_title(".1080p.x265.HEVC") is None

    def test_empty_is_none(self):
        assert clean_episode_title("") is None
        assert clean_episode_title(None) is None

    def test_tokens_match_whole_words_only(self):
        assert clean_episode_title("The Dvorak Files") == "The Dvorak Files"


class TestPredicates:
    """Tests for the classification helpers."""

    def test_video_extensions_case_insensitive(self):
        assert is_video_file(Path("movie.MKV"))
        assert is_video_file(Path("clip.m2ts"))
        assert not is_video_file(Path("movie.nfo"))
        assert not is_video_file(Path("mkv"))

    def test_episode_markers(self):
        assert has_episode_marker("show.S01E02.mkv")
        assert has_episode_marker("Season 1 Episode 2.mkv")
        assert not has_episode_marker("The Matrix.mkv")

    def test_date_marker(self):
        assert has_date_marker("Show 2020-01-15.mkv")
        assert not has_date_marker("Show 2020.mkv")

    def test_season_folder_names(self):
        assert is_season_folder_name("Season 1")
        assert is_season_folder_name("season02")
        assert is_season_folder_name("Specials")
        assert not is_season_folder_name("Extras")


class TestEpisodeParsers:
    """Tests for the individual parser attempts and their ordering."""

    def test_season_episode(self):
        parsed = parse_season_episode("Show.S01E04.The.Title.720p")
        assert parsed.season == 1
        assert parsed.episode == 4
        assert parsed.title == "The Title"

    def test_season_episode_without_title(self):
        parsed = parse_season_episode("show.s10e12")
        assert (parsed.season, parsed.episode, parsed.title) == (10, 12, None)

    def test_season_episode_no_match(self):
        assert parse_season_episode("01 - Pilot") is None

    def test_leading_number_bare(self):
        parsed = parse_leading_number("01")
        assert (parsed.season, parsed.episode, parsed.title) == (None, 1, None)

    def test_leading_number_with_title(self):
        parsed = parse_leading_number("03 - The Return")
        assert parsed.episode == 3
        assert parsed.title == "The Return"

    def test_leading_number_dotted(self):
        assert parse_leading_number("12.Finale").title == "Finale"

    def test_leading_number_rejects_years(self):
        assert parse_leading_number("2020-01-15 Guest") is None

    def test_air_date(self):
        parsed = parse_air_date("The Daily Show 2020.01.15 Guest Name")
        assert parsed.air_date == date(2020, 1, 15)
        assert parsed.episode == 0
        assert parsed.season is None
        assert parsed.title == "Guest Name"

    def test_invalid_air_date_is_not_a_match(self):
        assert parse_air_date("Show 2020-13-45") is None

    def test_parse_episode_prefers_season_episode(self):
        parsed = parse_episode("01 Show S02E03")
        assert (parsed.season, parsed.episode) == (2, 3)

    def test_parse_episode_falls_back_to_air_date(self):
        parsed = parse_episode("Show 2019-06-01")
        assert parsed.air_date == date(2019, 6, 1)

    def test_parse_episode_no_match(self):
        assert parse_episode("Behind the Curtain") is None


class TestSeasonFromPath:
    """Tests for season_from_path function."""

    def test_season_folder(self, tmp_path: Path):
        path = tmp_path / "Season 2" / "ep.mkv"
        assert season_from_path(path, tmp_path) == 2

    def test_specials_is_season_zero(self, tmp_path: Path):
        path = tmp_path / "Specials" / "ep.mkv"
        assert season_from_path(path, tmp_path) == 0

    def test_nearest_ancestor_wins(self, tmp_path: Path):
        path = tmp_path / "Season 1" / "Season 3" / "ep.mkv"
        assert season_from_path(path, tmp_path) == 3

    def test_file_at_root(self, tmp_path: Path):
        assert season_from_path(tmp_path / "ep.mkv", tmp_path) is None

    def test_root_name_is_ignored(self, tmp_path: Path):
        root = tmp_path / "Season 9 Box Set"
        assert season_from_path(root / "ep.mkv", root) is None


class TestFolderNames:
    """Tests for title, year and IMDb ID extraction."""

    def test_extract_title_and_year(self):
        assert extract_title("The Matrix (1999)") == "The Matrix"
        assert extract_year("The Matrix (1999)") == 1999

    def test_no_year(self):
        assert extract_title("Heat") == "Heat"
        assert extract_year("Heat") is None

    def test_parse_imdb_id(self):
        assert parse_imdb_id("tt0133093") == "tt0133093"
        assert parse_imdb_id("https://www.imdb.com/title/tt0133093/") == "tt0133093"
        assert parse_imdb_id("  tt12345678 ") == "tt12345678"

    def test_parse_imdb_id_invalid(self):
        assert parse_imdb_id("0133093") is None
        assert parse_imdb_id("tt12") is None
