"""Tests for pixel_image.core.env — .env loading, walk-up logic and Settings."""

import os
from pathlib import Path

import pytest
from pixel_image.core.env import Settings, find_dotenv, load_env, read_dotenv
from pixel_image.core.image import BorderType


class TestReadDotenv:
    def test_simple_key_value(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('FOO=bar\n')
        assert read_dotenv(f) == {'FOO': 'bar'}

    def test_quoted_values(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('KEY="hello world"\nKEY2=\'single\'\n')
        assert read_dotenv(f) == {'KEY': 'hello world', 'KEY2': 'single'}

    def test_comments_and_blank_lines_ignored(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('# comment\n\nFOO=bar\n\n')
        assert read_dotenv(f) == {'FOO': 'bar'}

    def test_export_prefix(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('export PIXEL_IMAGE_QUALITY=80\n')
        assert read_dotenv(f) == {'PIXEL_IMAGE_QUALITY': '80'}

    def test_no_value(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('NOEQUALS\nFOO=bar\n')
        assert read_dotenv(f) == {'FOO': 'bar'}


class TestFindDotenv:
    def test_finds_in_cwd(self, tmp_path: Path) -> None:
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert find_dotenv(tmp_path) == dotenv.resolve()

    def test_finds_in_parent(self, tmp_path: Path) -> None:
        subdir = tmp_path / 'sub'
        subdir.mkdir()
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert find_dotenv(subdir) == dotenv.resolve()

    def test_stops_at_git_dir(self, tmp_path: Path) -> None:
        # .env is above .git, so it must not be found
        repo = tmp_path / 'repo'
        (repo / '.git').mkdir(parents=True)
        (tmp_path / '.env').write_text('X=1\n')
        subdir = repo / 'src'
        subdir.mkdir()
        assert find_dotenv(subdir) is None

    def test_stops_at_git_file(self, tmp_path: Path) -> None:
        # .git as a file (worktree)
        repo = tmp_path / 'repo'
        repo.mkdir()
        (repo / '.git').write_text('gitdir: ../somewhere\n')
        (tmp_path / '.env').write_text('X=1\n')
        subdir = repo / 'src'
        subdir.mkdir()
        assert find_dotenv(subdir) is None

    def test_env_beside_git_is_found(self, tmp_path: Path) -> None:
        (tmp_path / '.git').mkdir()
        dotenv = tmp_path / '.env'
        dotenv.write_text('X=1\n')
        assert find_dotenv(tmp_path) == dotenv.resolve()


class TestLoadEnv:
    def test_sets_missing_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('TEST_PIXEL_KEY', raising=False)
        (tmp_path / '.env').write_text('TEST_PIXEL_KEY=secret\n')
        monkeypatch.chdir(tmp_path)
        load_env()
        assert os.environ.get('TEST_PIXEL_KEY') == 'secret'

    def test_does_not_overwrite_existing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('TEST_PIXEL_KEY2', 'original')
        (tmp_path / '.env').write_text('TEST_PIXEL_KEY2=fromfile\n')
        monkeypatch.chdir(tmp_path)
        load_env()
        assert os.environ.get('TEST_PIXEL_KEY2') == 'original'

    def test_explicit_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('TEST_PIXEL_KEY3', raising=False)
        dotenv = tmp_path / 'custom.env'
        dotenv.write_text('TEST_PIXEL_KEY3=custom\n')
        assert load_env(env_file=str(dotenv)) == dotenv
        assert os.environ.get('TEST_PIXEL_KEY3') == 'custom'

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        assert load_env(env_file=str(tmp_path / 'nope.env')) is None

    def test_returns_none_when_no_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        # tmp_path has no .env, and we fake a .git so it stops
        (tmp_path / '.git').mkdir()
        monkeypatch.chdir(tmp_path)
        assert load_env() is None


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings.from_env({})
        assert settings == Settings(quality=100, border=BorderType.CONSTANT, log_level='WARNING')

    def test_values(self) -> None:
        settings = Settings.from_env(
            {
                'PIXEL_IMAGE_QUALITY': '85',
                'PIXEL_IMAGE_BORDER': 'Reflect',
                'PIXEL_IMAGE_LOG_LEVEL': 'debug',
            }
        )
        assert settings.quality == 85
        assert settings.border is BorderType.REFLECT
        assert settings.log_level == 'DEBUG'

    def test_empty_values_use_defaults(self) -> None:
        settings = Settings.from_env({'PIXEL_IMAGE_QUALITY': '', 'PIXEL_IMAGE_BORDER': ''})
        assert settings.quality == 100
        assert settings.border is BorderType.CONSTANT

    @pytest.mark.parametrize('quality', ['0', '101', 'high'])
    def test_bad_quality(self, quality: str) -> None:
        with pytest.raises(ValueError, match='PIXEL_IMAGE_QUALITY'):
            Settings.from_env({'PIXEL_IMAGE_QUALITY': quality})

    def test_bad_border(self) -> None:
        with pytest.raises(ValueError, match='PIXEL_IMAGE_BORDER'):
            Settings.from_env({'PIXEL_IMAGE_BORDER': 'wrap'})

    def test_bad_log_level(self) -> None:
        with pytest.raises(ValueError, match='PIXEL_IMAGE_LOG_LEVEL'):
            Settings.from_env({'PIXEL_IMAGE_LOG_LEVEL': 'LOUD'})

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('PIXEL_IMAGE_QUALITY', '42')
        assert Settings.from_env().quality == 42
