"""Champs dérivés d'une note.

Les compteurs de mots sont persistés (recalculés à chaque écriture),
les temps de lecture sont calculés à la lecture uniquement.
"""
import math

WORDS_PER_MINUTE = 200


def count_words(text) -> int:
    if not text:
        return 0
    return len(text.split())


def reading_time(word_count: int) -> int:
    return math.ceil((word_count or 0) / WORDS_PER_MINUTE)
