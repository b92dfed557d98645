"""
Preprocessing module for text processing in protocol search.
Includes short token removal and stop word filtering.
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .tokenizer import RegexMatchTokenizer, Token

# Closed list of English function words ignored by search
STOP_WORDS = frozenset([
    "a", "an", "and", "are", "as", "at", "be", "but", "by", "for",
    "from", "has", "have", "if", "in", "into", "is", "it", "its", "of",
    "on", "or", "that", "the", "their", "them", "there", "they", "this", "to",
    "was", "were", "will", "with", "your",
])


class TokenPreprocessor(ABC):
    @abstractmethod
    def preprocess(self, token: Token, document: str) -> Token:
        raise NotImplementedError()

    def preprocess_all(self, tokens: List[Token], document: str) -> List[Token]:
        return [self.preprocess(token, document) for token in tokens]


class StopWordsPreprocessor(TokenPreprocessor):
    """Preprocessor for removing stop words."""

    def __init__(self, stop_words: Optional[Iterable[str]] = None):
        """
        Initialize preprocessor for removing stop words.

        Args:
            stop_words: Words to remove (defaults to STOP_WORDS)
        """
        self.stop_words = frozenset(stop_words) if stop_words is not None else STOP_WORDS

    def preprocess(self, token: Token, document: str) -> Token:
        """
        If token is a stop word, replace its processed_form with empty string.

        Args:
            token: Token to process
            document: Original document

        Returns:
            Processed token
        """
        if token.processed_form in self.stop_words:
            token.processed_form = ""
        return token


class NonsenseTokenPreprocessor(TokenPreprocessor):
    """Preprocessor for removing tokens shorter than the minimum length."""

    def __init__(self, min_word_length: int = 2):
        self.min_word_length = min_word_length

    def preprocess(self, token: Token, document: str) -> Token:
        if len(token.processed_form) < self.min_word_length:
            token.processed_form = ""
        return token


class PreprocessingPipeline:
    """Pipeline of token preprocessors."""

    def __init__(self, preprocessors, name="Default Pipeline"):
        """
        Initialize a preprocessing pipeline.

        Args:
            preprocessors: List of preprocessor objects
            name: Name of the pipeline
        """
        self.preprocessors = preprocessors
        self.name = name

    def preprocess(self, tokens: List[Token], document: str) -> List[Token]:
        """
        Apply all preprocessors to the tokens.

        Args:
            tokens: List of tokens to preprocess
            document: Original document text

        Returns:
            List of preprocessed tokens
        """
        for preprocessor in self.preprocessors:
            preprocessor.preprocess_all(tokens, document)

        return tokens


def create_default_pipeline() -> PreprocessingPipeline:
    """Pipeline used for both queries and protocol text."""
    return PreprocessingPipeline([
        NonsenseTokenPreprocessor(min_word_length=2),
        StopWordsPreprocessor(),
    ], name="Protocol Search Pipeline")


_DEFAULT_TOKENIZER = RegexMatchTokenizer()
_DEFAULT_PIPELINE = create_default_pipeline()


def tokenize(text: Optional[str], pipeline: Optional[PreprocessingPipeline] = None) -> List[str]:
    """
    Split text into search terms.

    Terms are lowercase, at least two characters long and never stop words.
    Order of appearance is kept and duplicates are retained.

    Args:
        text: Text to tokenize (None is treated as empty)
        pipeline: Preprocessing pipeline (defaults to the standard one)

    Returns:
        List of terms
    """
    if not text:
        return []

    pipeline = pipeline or _DEFAULT_PIPELINE
    tokens = pipeline.preprocess(_DEFAULT_TOKENIZER.tokenize(text), text)
    return [token.processed_form for token in tokens if token.processed_form]
