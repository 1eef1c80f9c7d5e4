"""
Tests for configuration loading and the command-line entry point.
"""
import pytest

from podcast_qna.__main__ import build_parser, main
from podcast_qna.config import QnaConfig
from podcast_qna.exceptions import ConfigurationError


ENV_VARS = [
    "OPENAI_API_KEY",
    "ASSEMBLYAI_API_KEY",
    "COMPLETION_MODEL",
    "EMBEDDING_MODEL",
    "FEED_URL",
    "QDRANT_URL",
    "QDRANT_PATH",
    "QDRANT_API_KEY",
    "TOP_K",
    "MIN_RELEVANCE",
    "LINE_BUDGET",
    "PARAGRAPH_BUDGET",
    "CHUNK_UNIT",
    "TRANSCRIPT_LANGUAGE",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the developer's environment and .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("podcast_qna.config.load_dotenv", lambda *args, **kwargs: False)


class TestFromEnv:
    def test_defaults(self):
        config = QnaConfig.from_env()

        assert config.openai_api_key is None
        assert config.completion_model == "gpt-4o-mini"
        assert config.embedding_model == "text-embedding-3-small"
        assert config.top_k == 3
        assert config.min_relevance == 0.2
        assert config.line_budget == 128
        assert config.paragraph_budget == 1024
        assert config.chunk_unit == "chars"
        assert "dotnetrocks" in config.feed_url

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("TOP_K", "5")
        monkeypatch.setenv("MIN_RELEVANCE", "0.5")
        monkeypatch.setenv("QDRANT_PATH", "/tmp/qdrant")

        config = QnaConfig.from_env()

        assert config.openai_api_key == "sk-test"
        assert config.top_k == 5
        assert config.min_relevance == 0.5
        assert config.qdrant_path == "/tmp/qdrant"

    def test_bad_number(self, monkeypatch):
        monkeypatch.setenv("TOP_K", "three")

        with pytest.raises(ConfigurationError, match="TOP_K"):
            QnaConfig.from_env()


class TestFromArgs:
    def test_command_line_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("TOP_K", "5")
        args = build_parser().parse_args(["--openai-api-key", "sk-flag", "--show", "2"])

        config = QnaConfig.from_args(args)

        assert config.openai_api_key == "sk-flag"
        assert config.show == "2"
        assert config.top_k == 5
        assert config.verbose is False


class TestValidate:
    def test_missing_keys_are_all_reported(self):
        with pytest.raises(ConfigurationError) as exc_info:
            QnaConfig().validate()

        assert "OPENAI_API_KEY is required" in exc_info.value.message
        assert "ASSEMBLYAI_API_KEY is required" in exc_info.value.message
        assert len(exc_info.value.details["problems"]) == 2

    def test_valid(self):
        config = QnaConfig(openai_api_key="sk", assemblyai_api_key="aai")

        assert config.validate() is config

    @pytest.mark.parametrize(
        "overrides",
        [
            {"top_k": 0},
            {"min_relevance": 1.5},
            {"line_budget": 0},
            {"chunk_unit": "words"},
        ],
    )
    def test_invalid_settings(self, overrides):
        config = QnaConfig(openai_api_key="sk", assemblyai_api_key="aai", **overrides)

        with pytest.raises(ConfigurationError):
            config.validate()


class TestMain:
    def test_missing_keys_exit_before_network(self, tmp_path, capsys):
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr(
                "podcast_qna.__main__.run",
                lambda *args, **kwargs: pytest.fail("workflow must not start"),
            )
            code = main(["--log-file", str(tmp_path / "qna.log")])

        assert code == 1
        assert "OPENAI_API_KEY is required" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "podcast-qna 0.1.0" in capsys.readouterr().out
