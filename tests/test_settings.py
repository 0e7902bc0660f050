import io
import logging

import pytest
from pydantic import ValidationError

from quizreco.api.v1.schemas.quiz import QuizAnswers
from quizreco.core.config import Settings
from quizreco.core.logging import configure_logging
from quizreco.domain.errors import UnknownProductFamilyError
from quizreco.domain.services.recommender_config import build_all_configs, build_recommender_config


def test_cors_origins_csv():
    s = Settings(CORS_ORIGIN="https://a.com, https://b.com,,")
    assert s.cors_origins == ["https://a.com", "https://b.com"]
    assert Settings(CORS_ORIGIN="").cors_origins == []


def test_policy_values_are_validated():
    with pytest.raises(ValidationError):
        Settings(BUDGET_POLICY="whatever")


def test_recommender_config_from_settings():
    s = Settings(BUDGET_POLICY="hard_ceiling", EXHAUSTION_POLICY="error", IMAGE_RELAY_URL="/api/img")
    cfg = build_recommender_config(s, " HAIR ")
    assert cfg.family.name == "hair"
    assert cfg.basket_size == 3
    assert cfg.budget_policy == "hard_ceiling"
    assert cfg.exhaustion_policy == "error"
    assert cfg.image_relay_url == "/api/img"

    assert set(build_all_configs(s)) == {"face", "hair"}
    assert build_all_configs(s)["face"].basket_size == 5

    with pytest.raises(UnknownProductFamilyError):
        build_recommender_config(s, "pets")


def test_configure_logging_single_handler():
    stream = io.StringIO()
    configure_logging(level="DEBUG", stream=stream)
    configure_logging(level="DEBUG", stream=stream)

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING

    logging.getLogger("quizreco.test").info("pipeline ready")
    assert "pipeline ready" in stream.getvalue()
    configure_logging(level=logging.INFO)


def test_quiz_answers_to_face_profile():
    p = QuizAnswers(pele="Mista e sensível", inc=["Acne", "Poros dilatados"], orcamento="Até R$ 60").to_profile()
    assert p.family == "face"
    assert p.skin_type == "combination"
    assert p.sensitive is True
    assert p.concerns == frozenset({"acne", "pores"})
    assert p.budget == "Até R$ 60"


def test_quiz_answers_to_hair_profile():
    p = QuizAnswers(cabelo="Cacheado", inc=["Frizz", "Queda"], sensibilidade="Sim", familia="hair").to_profile()
    assert p.family == "hair"
    assert p.skin_type == "curly"
    assert p.sensitive is True
    assert p.concerns == frozenset({"frizz", "hair_loss"})


def test_quiz_answers_default_family():
    assert QuizAnswers().to_profile(default_family="hair").family == "hair"
    p = QuizAnswers().to_profile()
    assert p.skin_type is None
    assert p.concerns == frozenset()
