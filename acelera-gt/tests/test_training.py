import asyncio
import json

import pytest

import config
import gemini_client
import training
from schemas import Difficulty

QUIZ_REPLY = {
    "title": "Quiz sobre Vitrinismo - Nível Médio",
    "questions": [
        {
            "questionText": "Com que frequência a vitrine deve mudar?",
            "options": ["Nunca", "A cada coleção", "Todo ano", "Só no Natal"],
            "correctAnswerIndex": 1,
            "explanation": "Vitrines novas acompanham as coleções.",
        }
    ],
}

COURSE_REPLY = {
    "title": "Vitrinismo para calçados",
    "description": "Monte vitrines que vendem.",
    "points": 9999,
    "difficulty": "facil",
    "modules": [{"title": "Luz", "content": "## Luz\n\nIlumine os destaques."}],
    "quiz": QUIZ_REPLY,
}


def reply_with(monkeypatch, text=None, error=None):
    prompts = []

    async def fake_generate_text_async(prompt, **kwargs):
        prompts.append(prompt)
        if error is not None:
            raise error
        return text

    monkeypatch.setattr(gemini_client, "generate_text_async", fake_generate_text_async)
    return prompts


# --- JSON extraction ---
def test_extract_json_from_bare_object():
    assert training.extract_json('Aqui está: {"a": 1} obrigado') == {"a": 1}


def test_extract_json_from_fenced_block():
    text = 'Resposta:\n```json\n{"a": {"b": [1, 2]}}\n```\n'
    assert training.extract_json(text) == {"a": {"b": [1, 2]}}


@pytest.mark.parametrize("text", [None, "", "   ", "sem json aqui", "```json\n[1, 2]\n```"])
def test_extract_json_rejects_unusable_replies(text):
    with pytest.raises(ValueError):
        training.extract_json(text)


def test_extract_json_rejects_malformed_json():
    with pytest.raises(ValueError):
        training.extract_json('{"a": 1,,}')


# --- Quiz ---
def test_generate_quiz_accepts_camel_case_reply(monkeypatch):
    prompts = reply_with(monkeypatch, text=json.dumps(QUIZ_REPLY))
    quiz = asyncio.run(training.generate_quiz("Vitrinismo", Difficulty.DIFICIL, number_of_questions=3))

    assert quiz.title == QUIZ_REPLY["title"]
    assert quiz.questions[0].question_text == "Com que frequência a vitrine deve mudar?"
    assert quiz.questions[0].correct_answer_index == 1
    assert "Difícil" in prompts[0]
    assert "exatamente 3 perguntas" in prompts[0]


def test_generate_quiz_falls_back_on_api_error(monkeypatch):
    reply_with(monkeypatch, error=gemini_client.GeminiClientError("boom"))
    quiz = asyncio.run(training.generate_quiz("Vitrinismo"))
    assert quiz == training.fallback_quiz()
    assert len(quiz.questions) == 5


def test_generate_quiz_falls_back_on_empty_question_list(monkeypatch):
    reply_with(monkeypatch, text=json.dumps({"title": "Vazio", "questions": []}))
    assert asyncio.run(training.generate_quiz("Vitrinismo")).title == config.FALLBACK_QUIZ["title"]


def test_generate_quiz_falls_back_on_invalid_options(monkeypatch):
    broken = json.loads(json.dumps(QUIZ_REPLY))
    broken["questions"][0]["options"] = ["Só", "duas"]
    reply_with(monkeypatch, text=json.dumps(broken))
    assert asyncio.run(training.generate_quiz("Vitrinismo")) == training.fallback_quiz()


def test_generate_quiz_without_api_key_serves_fallback():
    # conftest leaves GEMINI_API_KEY empty.
    assert asyncio.run(training.generate_quiz("Vitrinismo")) == training.fallback_quiz()


# --- Course ---
def test_generate_course_takes_points_from_configuration(monkeypatch):
    reply_with(monkeypatch, text="```json\n" + json.dumps(COURSE_REPLY) + "\n```")
    course = asyncio.run(training.generate_course("Vitrinismo", Difficulty.DIFICIL))

    assert course.title == "Vitrinismo para calçados"
    assert course.points == config.COURSE_POINTS["dificil"]
    assert course.difficulty is Difficulty.DIFICIL
    assert len(course.quiz.questions) == 1


def test_generate_course_falls_back_without_modules(monkeypatch):
    reply_with(monkeypatch, text=json.dumps({**COURSE_REPLY, "modules": []}))
    course = asyncio.run(training.generate_course("Vitrinismo", Difficulty.FACIL))

    assert course.title == config.FALLBACK_COURSE["title"]
    assert course.points == 100
    assert course.difficulty is Difficulty.FACIL


# --- Sales trends ---
def test_analyze_sales_trends(monkeypatch):
    prompts = []

    def fake_generate_text(prompt, **kwargs):
        prompts.append(prompt)
        return json.dumps({"summary": "Alta", "topProducts": "Tênis", "insights": "Reforçar estoque"})

    monkeypatch.setattr(gemini_client, "generate_text", fake_generate_text)
    analysis = training.analyze_sales_trends([{"product": "Tênis", "amount": 3}], time_frame="weekly")

    assert analysis.top_products == "Tênis"
    assert "weekly" in prompts[0]
    assert "\"amount\": 3" in prompts[0]


def test_analyze_sales_trends_falls_back(monkeypatch):
    def fake_generate_text(prompt, **kwargs):
        return "não sei"

    monkeypatch.setattr(gemini_client, "generate_text", fake_generate_text)
    analysis = training.analyze_sales_trends([])
    assert analysis.summary == config.FALLBACK_SALES_TRENDS["summary"]
