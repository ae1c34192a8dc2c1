"""Tests for the cli module."""

from unittest.mock import patch

import pytest

from fontes_qa.cli import _setup_logging, ask_once, chat, main, warm
from fontes_qa.config import AppConfig, CorpusConfig
from fontes_qa.errors import ProviderError
from fontes_qa.models import Answer, Source

from helpers import StubEmbedder, one_hot, write_record


@pytest.fixture
def cfg(docs_dir) -> AppConfig:
    return AppConfig(corpus=CorpusConfig(documents_dir=str(docs_dir)))


@pytest.fixture
def embedder(stub_embedder):
    with patch("fontes_qa.cli.get_embedding_provider", return_value=stub_embedder):
        yield stub_embedder


class TestSetupLogging:
    def test_default_level_is_info(self) -> None:
        with patch("fontes_qa.cli.logging.basicConfig") as mock_basic:
            _setup_logging()
            assert mock_basic.call_args[1]["level"] == 20  # logging.INFO

    def test_verbose_sets_debug(self) -> None:
        with patch("fontes_qa.cli.logging.basicConfig") as mock_basic:
            _setup_logging(verbose=True)
            assert mock_basic.call_args[1]["level"] == 10  # logging.DEBUG


class TestWarm:
    def test_reports_usable_documents(self, cfg, embedder, capsys) -> None:
        usable = warm(cfg)

        assert usable == 2
        out = capsys.readouterr().out
        assert "2 document(s) loaded, 2 embedded, 2 usable" in out

    def test_prints_skips_and_failures(self, cfg, docs_dir, capsys) -> None:
        (docs_dir / "broken.json").write_text("{", encoding="utf-8")
        failing = StubEmbedder(fail_on={"Prazo de entrega do IRS"})

        with patch("fontes_qa.cli.get_embedding_provider", return_value=failing):
            usable = warm(cfg)

        out = capsys.readouterr().out
        assert usable == 1
        assert "skipped broken.json" in out
        assert "embedding failed for irs" in out

    def test_missing_folder(self, tmp_path, embedder, capsys) -> None:
        cfg = AppConfig(corpus=CorpusConfig(documents_dir=str(tmp_path / "nope")))
        assert warm(cfg) == 0


class TestAskOnce:
    @patch("fontes_qa.cli.rag_engine.ask")
    def test_prints_answer_and_sources(self, mock_ask, cfg, embedder, capsys) -> None:
        mock_ask.return_value = Answer(
            answer="Até 30 de junho.",
            sources=[Source(title="IRS 2024", url="https://example.gov.pt/irs")],
        )

        code = ask_once("Quando entrego o IRS?", cfg)

        assert code == 0
        out = capsys.readouterr().out
        assert "Até 30 de junho." in out
        assert "IRS 2024 <https://example.gov.pt/irs>" in out

    def test_blank_question_fails(self, cfg, embedder, capsys) -> None:
        assert ask_once("   ", cfg) == 1
        assert "Pergunta vazia" in capsys.readouterr().out

    @patch("fontes_qa.cli.rag_engine.ask")
    def test_provider_error_fails(self, mock_ask, cfg, embedder, capsys) -> None:
        mock_ask.side_effect = ProviderError("ollama", "down")
        assert ask_once("Olá?", cfg) == 1
        assert "Provider error: ollama: down" in capsys.readouterr().out

    def test_embedding_length_mismatch_fails(self, tmp_path, embedder, capsys) -> None:
        write_record(
            tmp_path, "a.json", id="a", title="A", url="u", text="t",
            embedding=one_hot(0, dim=12),
        )
        cfg = AppConfig(corpus=CorpusConfig(documents_dir=str(tmp_path)))

        assert ask_once("Olá?", cfg) == 1
        assert "Corpus error: Vector length mismatch" in capsys.readouterr().out

    def test_corpus_path_not_a_directory_fails(self, tmp_path, embedder, capsys) -> None:
        not_a_dir = tmp_path / "data.json"
        not_a_dir.write_text("{}", encoding="utf-8")
        cfg = AppConfig(corpus=CorpusConfig(documents_dir=str(not_a_dir)))

        assert ask_once("Olá?", cfg) == 1
        assert "Corpus error: Not a directory" in capsys.readouterr().out


class TestChat:
    def test_empty_corpus_exits(self, tmp_path, embedder, capsys) -> None:
        cfg = AppConfig(corpus=CorpusConfig(documents_dir=str(tmp_path / "nope")))
        chat(cfg)
        assert "No documents found" in capsys.readouterr().out

    @pytest.mark.parametrize("command", ["quit", "exit", "q"])
    def test_quit_commands(self, cfg, embedder, capsys, command) -> None:
        with patch("builtins.input", side_effect=[command]):
            chat(cfg)
        assert "Goodbye!" in capsys.readouterr().out

    def test_eof_exits(self, cfg, embedder, capsys) -> None:
        with patch("builtins.input", side_effect=EOFError):
            chat(cfg)
        assert "Goodbye!" in capsys.readouterr().out

    @patch("fontes_qa.cli.rag_engine.ask")
    def test_empty_input_skipped(self, mock_ask, cfg, embedder) -> None:
        with patch("builtins.input", side_effect=["", "quit"]):
            chat(cfg)
        mock_ask.assert_not_called()

    @patch("fontes_qa.cli.rag_engine.ask")
    def test_answers_question(self, mock_ask, cfg, embedder, capsys) -> None:
        mock_ask.return_value = Answer(answer="Resposta de teste", sources=[])
        with patch("builtins.input", side_effect=["Quando entrego o IRS?", "quit"]):
            chat(cfg)

        mock_ask.assert_called_once()
        assert "Resposta de teste" in capsys.readouterr().out

    @patch("fontes_qa.cli.rag_engine.ask")
    def test_provider_error_keeps_session(self, mock_ask, cfg, embedder, capsys) -> None:
        mock_ask.side_effect = [ProviderError("ollama", "down"), Answer(answer="ok")]
        with patch("builtins.input", side_effect=["a", "b", "quit"]):
            chat(cfg)

        out = capsys.readouterr().out
        assert "Provider error" in out
        assert "ok" in out

    @patch("fontes_qa.cli.rag_engine.ask")
    def test_corpus_error_keeps_session(self, mock_ask, cfg, embedder, capsys) -> None:
        mock_ask.side_effect = [ValueError("Vector length mismatch: 12 != 10"), Answer(answer="ok")]
        with patch("builtins.input", side_effect=["a", "b", "quit"]):
            chat(cfg)

        out = capsys.readouterr().out
        assert "Corpus error: Vector length mismatch" in out
        assert "ok" in out

    def test_corpus_path_not_a_directory_exits(self, tmp_path, embedder, capsys) -> None:
        not_a_dir = tmp_path / "data.json"
        not_a_dir.write_text("{}", encoding="utf-8")
        cfg = AppConfig(corpus=CorpusConfig(documents_dir=str(not_a_dir)))

        chat(cfg)

        assert "Corpus error: Not a directory" in capsys.readouterr().out


class TestMain:
    @patch("fontes_qa.cli.warm", return_value=3)
    def test_warm_command(self, mock_warm) -> None:
        with patch("sys.argv", ["fontes-qa", "--folder", "/srv/data", "warm"]):
            with pytest.raises(SystemExit) as info:
                main()

        assert info.value.code == 0
        cfg = mock_warm.call_args.args[0]
        assert cfg.corpus.documents_dir == "/srv/data"

    @patch("fontes_qa.cli.ask_once", return_value=0)
    def test_ask_command(self, mock_ask_once) -> None:
        with patch("sys.argv", ["fontes-qa", "--model", "llama3.2:1b", "ask", "Olá?"]):
            with pytest.raises(SystemExit):
                main()

        question, cfg = mock_ask_once.call_args.args
        assert question == "Olá?"
        assert cfg.llm.model == "llama3.2:1b"

    @patch("fontes_qa.cli.chat")
    def test_chat_command(self, mock_chat) -> None:
        with patch("sys.argv", ["fontes-qa", "chat"]):
            main()
        mock_chat.assert_called_once()

    def test_no_command_prints_help(self, capsys) -> None:
        with patch("sys.argv", ["fontes-qa"]):
            with pytest.raises(SystemExit) as info:
                main()
        assert info.value.code == 1
        assert "usage" in capsys.readouterr().out.lower()
