# acelera-gt/training.py
"""
AI-generated training content for the sales academy.

Each flow makes a single request to the generative model and validates the
JSON it returns. Anything unusable (API error, empty text, malformed JSON,
schema mismatch, a quiz without questions) is logged and replaced by a static
fallback so sellers always get something to work with.
"""
import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

import config
import gemini_client
from schemas import Course, Difficulty, Quiz, SalesTrendAnalysis

logger = logging.getLogger(__name__)

DIFFICULTY_LABELS = {
    Difficulty.FACIL: "Fácil",
    Difficulty.MEDIO: "Médio",
    Difficulty.DIFICIL: "Difícil",
}

_JSON_BLOCK = re.compile(r"```(?:json)?\s*\n([\s\S]*?)\n```|(\{[\s\S]*\})")

QUIZ_PROMPT = """
Você é especialista em treinamentos para vendedores de lojas de calçados. Crie um QUIZ de nível de dificuldade "{difficulty}" sobre o tema "{topic}".

Regras obrigatórias:
- Gere exatamente {number_of_questions} perguntas.
- As perguntas devem variar em complexidade de acordo com a dificuldade solicitada.
- Cada pergunta deve ter um enunciado claro, 4 alternativas diferentes, o índice da resposta correta (de 0 a 3) e uma explicação curta.

Estrutura esperada (JSON):
{{
  "title": "Quiz sobre {topic} - Nível {difficulty}",
  "questions": [
    {{
      "question_text": "Qual material é mais indicado para tênis de corrida?",
      "options": ["Couro", "Lona", "Mesh", "Camurça"],
      "correct_answer_index": 2,
      "explanation": "O mesh é leve, flexível e respirável, ideal para tênis de corrida."
    }}
  ]
}}

Responda SOMENTE com o JSON, sem blocos de código, comentários ou texto adicional.
"""

COURSE_PROMPT = """
Você é especialista em criar materiais de treinamento para vendedores de lojas de calçados.
Gere um curso completo de nível "{difficulty}" sobre "{topic}".

O curso deve conter:
1. Um título claro ("title") e uma descrição curta ("description").
2. De 3 a 4 módulos ("modules"), cada um com "title" e "content" em Markdown, práticos para um vendedor de calçados.
3. Um quiz final ("quiz") com "title" e 5 perguntas ("questions"), cada uma com "question_text", exatamente 4 "options", "correct_answer_index" (0 a 3) e "explanation".

Responda SOMENTE com um objeto JSON válido nesse formato.
"""

SALES_TRENDS_PROMPT = """
You are an expert sales data analyst. Analyze the provided sales data to identify trends,
anomalies, and top-performing products.

Sales Data ({time_frame}): {sales_data}

Respond only with a JSON object with the keys "summary", "top_products" and "insights".
Be concise and clear.
"""


def extract_json(text: Optional[str]) -> dict:
    """Pulls the JSON object out of a model reply, fenced or bare."""
    if not text or not text.strip():
        raise ValueError("empty response")
    match = _JSON_BLOCK.search(text)
    if not match:
        raise ValueError("no JSON object in response")
    data = json.loads(match.group(1) or match.group(2))
    if not isinstance(data, dict):
        raise ValueError("response JSON is not an object")
    return data


def fallback_quiz() -> Quiz:
    return Quiz(**config.FALLBACK_QUIZ)


def fallback_course(difficulty: Difficulty) -> Course:
    return Course(**config.FALLBACK_COURSE, points=config.COURSE_POINTS[difficulty.value], difficulty=difficulty)


def parse_quiz(text: Optional[str]) -> Quiz:
    return Quiz(**extract_json(text))


def parse_course(text: Optional[str], difficulty: Difficulty) -> Course:
    data = extract_json(text)
    # Points come from configuration, not from the model.
    data.pop("points", None)
    data.pop("difficulty", None)
    return Course(**data, points=config.COURSE_POINTS[difficulty.value], difficulty=difficulty)


async def generate_quiz(topic: str, difficulty: Difficulty = Difficulty.MEDIO, number_of_questions: int = 5) -> Quiz:
    prompt = QUIZ_PROMPT.format(
        topic=topic,
        difficulty=DIFFICULTY_LABELS[difficulty],
        number_of_questions=number_of_questions,
    )
    try:
        text = await gemini_client.generate_text_async(prompt)
        return parse_quiz(text)
    except (gemini_client.GeminiClientError, ValueError, ValidationError) as e:
        logger.warning("Quiz generation failed for topic '%s', serving fallback quiz: %s", topic, e)
        return fallback_quiz()


async def generate_course(topic: str, difficulty: Difficulty = Difficulty.MEDIO) -> Course:
    prompt = COURSE_PROMPT.format(topic=topic, difficulty=DIFFICULTY_LABELS[difficulty])
    try:
        text = await gemini_client.generate_text_async(prompt)
        return parse_course(text, difficulty)
    except (gemini_client.GeminiClientError, ValueError, ValidationError) as e:
        logger.warning("Course generation failed for topic '%s', serving fallback course: %s", topic, e)
        return fallback_course(difficulty)


def analyze_sales_trends(sales_data: list, time_frame: str = "monthly") -> SalesTrendAnalysis:
    prompt = SALES_TRENDS_PROMPT.format(time_frame=time_frame, sales_data=json.dumps(sales_data, default=str))
    try:
        text = gemini_client.generate_text(prompt, temperature=0.2)
        return SalesTrendAnalysis(**extract_json(text))
    except (gemini_client.GeminiClientError, ValueError, ValidationError) as e:
        logger.warning("Sales trend analysis failed, serving neutral analysis: %s", e)
        return SalesTrendAnalysis(**config.FALLBACK_SALES_TRENDS)
