"""Personal glossary with auto-generated multiple-choice quizzes."""

__version__ = "0.1.0"
