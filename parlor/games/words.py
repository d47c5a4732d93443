"""
Word lists for the drawing game and the daily word game.
"""

from __future__ import annotations
from dataclasses import dataclass

# Words offered to the drawer, easy to medium difficulty
DRAW_WORDS = [
    # Animals
    "kedi", "köpek", "kuş", "balık", "fil", "aslan", "tavşan", "kaplumbağa",
    # Objects
    "ev", "araba", "uçak", "güneş", "ay", "yıldız", "ağaç", "çiçek",
    "masa", "sandalye", "kalem", "kitap", "saat", "telefon", "bilgisayar",
    # Food
    "elma", "muz", "portakal", "üzüm", "ekmek", "su", "çay", "kahve",
    # Activities
    "koşmak", "yüzmek", "dans", "müzik", "futbol", "basketbol", "okul",
    # Weather and nature
    "yağmur", "kar", "bulut", "gökkuşağı", "deniz", "dağ", "nehir",
]


@dataclass(frozen=True)
class TargetWord:
    word: str
    hint: str


WORD_LENGTH = 5

_TARGETS = {
    "Vehicles": ["araba", "vagon"],
    "Animals": ["köpek", "balık"],
    "Nature": ["deniz", "orman", "sahil", "çiçek", "nehir", "fidan"],
    "Food": ["meyve", "limon", "tatlı", "lokma", "ekmek", "yemek", "gazoz", "sebze"],
    "Objects": [
        "kitap", "tabak", "paket", "elmas", "fener", "kalem", "çatal",
        "bıçak", "çanta", "jilet", "radyo", "perde", "kuşak",
    ],
    "People": ["bebek", "çocuk", "gelin"],
    "Places": ["bahçe", "cadde", "şehir", "pazar", "liman", "fırın"],
    "World": ["dünya", "evren", "güneş"],
    "Ideas": ["değer", "haber", "masal", "vatan", "huzur", "anlam", "dilek", "neden", "sebep"],
    "Time": ["zaman", "hafta", "akşam", "nisan", "sabah"],
    "Materials": ["maden", "çelik", "damla"],
    "Qualities": ["zalim", "cesur", "engin", "ilkay"],
    "Shapes": ["kanat", "zirve", "zemin", "beyaz", "tavan", "viraj", "milli"],
}

TARGET_WORDS = [TargetWord(word, hint) for hint, words in _TARGETS.items() for word in words]

VALID_GUESSES = frozenset(t.word for t in TARGET_WORDS)
