import re
from enum import Enum
from typing import List


class TokenType(Enum):
    WORD = "word"
    NUMBER = "number"


class Token:
    """
    A single token extracted from text.

    `original_form` keeps the matched text, `processed_form` is rewritten by
    preprocessors (an empty processed form means the token was discarded).
    """

    def __init__(self, original_form: str, position: int, token_type: TokenType = TokenType.WORD):
        self.original_form = original_form
        self.processed_form = original_form
        self.position = position
        self.token_type = token_type

    def __repr__(self):
        return f"Token({self.processed_form!r}, position={self.position}, type={self.token_type.value})"


class Tokenizer:
    def tokenize(self, text: str) -> List[Token]:
        raise NotImplementedError()


class RegexMatchTokenizer(Tokenizer):
    """
    Tokenizer that lowercases text and extracts maximal runs of
    letters, digits and apostrophes. Short runs are left to the preprocessors.
    """

    def __init__(self):
        self.pattern = re.compile(r"[a-z0-9']+")

    def tokenize(self, text: str) -> List[Token]:
        if not text:
            return []

        # Lowercase before matching, the pattern only knows lowercase letters
        lowered = text.lower()

        tokens = []
        for match in self.pattern.finditer(lowered):
            value = match.group()
            token_type = TokenType.NUMBER if value.isdigit() else TokenType.WORD
            tokens.append(Token(value, match.start(), token_type))
        return tokens
