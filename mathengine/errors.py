"""
Custom exceptions for the expression engine.

Every failure the engine reports is a ``MathEngineError``. It derives from
``ValueError`` so callers that already guard input handling with
``except ValueError`` keep working.
"""


class MathEngineError(ValueError):
    """Base exception class for expression engine errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class EvaluationError(MathEngineError):
    """Raised when a tree cannot be reduced to a single number."""
    pass


class DivisionByZero(EvaluationError, ZeroDivisionError):
    """Raised when a denominator evaluates to zero."""
    pass


class UnboundVariable(EvaluationError):
    """Raised when the evaluator reaches a variable."""

    def __init__(self, name: str):
        super().__init__(f"Cannot evaluate unbound variable '{name}'.",
                         details={"variable": name})
        self.name = name


class UndefinedResult(EvaluationError):
    """Raised for results with no defined value, such as 0 ^ 0."""
    pass


class NonRealResult(EvaluationError):
    """Raised when an operation would leave the real numbers."""
    pass


class NonPolynomialConstruct(MathEngineError):
    """Raised when a tree cannot be reduced to a polynomial."""
    pass


class MalformedOperator(MathEngineError):
    """Raised when an operator or expression type is unset or unrecognized."""
    pass


class UnsupportedLanguage(MathEngineError):
    """Raised by ``render_english_strict`` for languages other than English."""

    def __init__(self, language):
        super().__init__(f"Rendering is not supported for language: {language}",
                         details={"language": str(language)})
        self.language = language
