"""flashdeck: SM-2 spaced repetition flashcards for the terminal."""

from flashdeck.consts import VERSION

__version__ = VERSION
