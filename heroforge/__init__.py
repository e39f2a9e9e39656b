"""heroforge — 전투 보상, 아이템 성장, 강화 경제, 에너지 회복"""

__version__ = "0.1.0"
