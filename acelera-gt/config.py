# acelera-gt/config.py

"""
Central configuration for Acelera GT.
-- Goal tiers, prizes, point rules and seed data for a new installation --
"""

import os
from dotenv import load_dotenv

load_dotenv()

# --- Environment ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./acelera_gt.db")
REDIS_URL = os.getenv("REDIS_URL")
CELERY_ALWAYS_EAGER = os.getenv("CELERY_ALWAYS_EAGER", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Goal Tiers ---
TIER_LABELS = {
    "metinha": "Metinha",
    "meta": "Meta",
    "metona": "Metona",
    "lendaria": "Lendária",
}

TEAM_BONUS = 100

DEFAULT_GOALS = {
    "sales_value": {
        "metinha": {"threshold": 4000, "prize": 50},
        "meta": {"threshold": 5000, "prize": 100},
        "metona": {"threshold": 6000, "prize": 200},
        "lendaria": {"threshold": 7000, "prize": 300},
        "performance_bonus": {"per": 1000, "prize": 50},
    },
    "ticket_average": {
        "metinha": {"threshold": 130, "prize": 20},
        "meta": {"threshold": 150, "prize": 40},
        "metona": {"threshold": 180, "prize": 60},
        "lendaria": {"threshold": 200, "prize": 80},
    },
    "pa": {
        "metinha": {"threshold": 2.0, "prize": 20},
        "meta": {"threshold": 2.5, "prize": 40},
        "metona": {"threshold": 2.8, "prize": 60},
        "lendaria": {"threshold": 3.0, "prize": 80},
    },
    "points": {
        "metinha": {"threshold": 800, "prize": 25},
        "meta": {"threshold": 1000, "prize": 50},
        "metona": {"threshold": 1500, "prize": 75},
        "lendaria": {"threshold": 2000, "prize": 100},
        "top_scorer_prize": 50,
    },
}

# --- Academy Points System ---
QUIZ_POINTS_PER_CORRECT_ANSWER = {
    "facil": 10,
    "medio": 20,
    "dificil": 30,
}

COURSE_POINTS = {
    "facil": 100,
    "medio": 150,
    "dificil": 200,
}

COURSE_TOPICS = [
    "Técnicas de Atendimento ao Cliente para Lojas de Calçados",
    "Conhecimento de Materiais: Couro, Sintéticos e Tecidos",
    "Como Lidar com Objeções de Clientes e Fechar Vendas",
    "Organização de Estoque e Vitrinismo para Calçados",
    "Vendas Adicionais: Como Oferecer Meias e Produtos de Limpeza",
]

# --- Seed Data ---
DEFAULT_SELLERS = [
    {"id": "1", "name": "Rian Breston", "sales_value": 5240.75, "ticket_average": 150.25, "pa": 2.1, "points": 1200},
    {"id": "2", "name": "Carla Dias", "sales_value": 4890.50, "ticket_average": 142.80, "pa": 2.5, "points": 950},
    {"id": "3", "name": "Marcos Andrade", "sales_value": 6100.00, "ticket_average": 185.00, "pa": 1.9, "points": 1500},
    {"id": "4", "name": "Ana Pereira", "sales_value": 5800.00, "ticket_average": 190.50, "pa": 2.0, "points": 1350},
    {"id": "5", "name": "Lucas Martins", "sales_value": 4200.20, "ticket_average": 120.70, "pa": 2.9, "points": 1800},
]

DEFAULT_MISSIONS = [
    {
        "id": "1",
        "name": "Venda 3 pares de tênis de corrida",
        "description": "Feche três vendas de tênis de corrida durante a semana.",
        "start_date": "2024-07-01",
        "end_date": "2024-07-07",
        "reward_type": "points",
        "reward_value": 100,
    },
    {
        "id": "2",
        "name": "Semana do kit de limpeza",
        "description": "Inclua um kit de limpeza em 10 atendimentos.",
        "start_date": "2024-07-08",
        "end_date": "2024-07-14",
        "reward_type": "cash",
        "reward_value": 50,
    },
]

# --- AI Fallback Payloads ---
# Served whenever the generative model fails or returns something unusable.
FALLBACK_QUIZ = {
    "title": "Quiz de Técnicas de Venda - Básico",
    "questions": [
        {
            "question_text": "Qual a melhor forma de abordar um cliente?",
            "options": [
                "Esperar que ele fale primeiro",
                "Cumprimentar com simpatia e oferecer ajuda",
                "Segui-lo silenciosamente",
                "Falar das promoções imediatamente",
            ],
            "correct_answer_index": 1,
            "explanation": "Uma abordagem simpática cria conexão e confiança.",
        },
        {
            "question_text": "O que caracteriza uma boa venda consultiva?",
            "options": [
                "Oferecer o item mais caro",
                "Entender a necessidade do cliente",
                "Focar apenas na comissão",
                "Falar sobre todos os produtos da loja",
            ],
            "correct_answer_index": 1,
            "explanation": "Na venda consultiva, você ajuda o cliente com a melhor solução.",
        },
        {
            "question_text": "Para um cliente que busca conforto, qual tipo de palmilha você recomenda?",
            "options": ["Plana e dura", "Com espuma de memória (Memory Foam)", "De borracha simples", "Nenhuma"],
            "correct_answer_index": 1,
            "explanation": "A espuma de memória se molda ao pé, oferecendo máximo conforto e absorção de impacto.",
        },
        {
            "question_text": "Um cliente reclama que o sapato de couro está apertado. O que você diz?",
            "options": [
                "Que ele vai lacear com o tempo",
                "Que ele pegou o número errado",
                "Oferece um produto para lacear o couro e explica o processo",
                "Sugere um modelo sintético",
            ],
            "correct_answer_index": 2,
            "explanation": "Oferecer uma solução proativa demonstra conhecimento e cuidado com o cliente.",
        },
        {
            "question_text": "O que é 'PA' em vendas de varejo?",
            "options": ["Produto por Atendimento", "Pagamento Aprovado", "Preço de Atacado", "Promoção Ativa"],
            "correct_answer_index": 0,
            "explanation": "PA mede a quantidade de produtos vendidos por cliente atendido.",
        },
    ],
}

FALLBACK_COURSE = {
    "title": "Fundamentos do Atendimento em Lojas de Calçados",
    "description": "Curso padrão com os pilares do atendimento consultivo.",
    "modules": [
        {
            "title": "Abordagem e primeira impressão",
            "content": "## Abordagem\n\nCumprimente o cliente em até 30 segundos e ofereça ajuda sem pressionar.",
        },
        {
            "title": "Descobrindo a necessidade",
            "content": "## Perguntas abertas\n\nPergunte sobre o uso do calçado, conforto e ocasião antes de sugerir modelos.",
        },
        {
            "title": "Venda adicional",
            "content": "## Aumentando o PA\n\nOfereça meias, palmilhas e produtos de limpeza ligados ao par escolhido.",
        },
    ],
    "quiz": FALLBACK_QUIZ,
}

FALLBACK_SALES_TRENDS = {
    "summary": "Não foi possível analisar os dados de vendas no momento.",
    "top_products": "Indisponível.",
    "insights": "Tente novamente mais tarde.",
}
