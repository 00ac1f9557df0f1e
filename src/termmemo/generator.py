import logging
import uuid
from typing import List, Optional, Sequence

from .config import settings
from .models import Question, QuizBatch, Term
from .sampling import RandomSource, default_source, sample, shuffle

logger = logging.getLogger(__name__)


class QuestionGenerator:
    """Builds multiple-choice questions from a snapshot of terms.

    The generator never touches storage: callers pass the full term list in.
    All randomness comes from the injected ``RandomSource``.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        option_count: int = settings.OPTION_COUNT,
        same_category_limit: int = settings.SAME_CATEGORY_DISTRACTORS,
        min_terms: int = settings.MIN_TERMS,
    ):
        self.rng = rng or default_source
        self.option_count = option_count
        self.same_category_limit = same_category_limit
        self.min_terms = min_terms

    def can_generate(self, all_terms: Sequence[Term]) -> bool:
        return len(all_terms) >= self.min_terms

    def derive_question(
        self, target: Term, all_terms: Sequence[Term]
    ) -> Optional[Question]:
        """
        Build one question for ``target``.

        Returns None when fewer than ``option_count`` distinct answers are
        available once duplicates are dropped.
        """
        others = [t for t in all_terms if t.id != target.id]
        if target.category:
            same_category = [t for t in others if t.category == target.category]
            different_category = [
                t for t in others if t.category != target.category
            ]
        else:
            same_category = []
            different_category = others

        options = self._generate_options(
            target.meaning, same_category, different_category
        )
        if len(options) < self.option_count:
            return None

        return Question(
            id=self._question_id(),
            word=target.word,
            correct_answer=target.meaning,
            options=shuffle(options, self.rng),
            category=target.category,
            term_id=target.id,
        )

    def _question_id(self) -> str:
        """uuid4-shaped id drawn from the injected source."""
        return str(uuid.UUID(int=self.rng.next_index(1 << 128), version=4))

    def _generate_options(
        self,
        correct_answer: str,
        same_category: List[Term],
        different_category: List[Term],
    ) -> List[str]:
        """Correct answer first, then same-category picks, then top-up."""
        options = [correct_answer]
        options.extend(
            t.meaning
            for t in sample(same_category, self.same_category_limit, self.rng)
        )

        if len(options) < self.option_count:
            missing = self.option_count - len(options)
            options.extend(
                t.meaning for t in sample(different_category, missing, self.rng)
            )

        # Duplicated meanings are dropped, not replaced.
        return list(dict.fromkeys(options))[: self.option_count]

    def generate_batch(
        self,
        count: int,
        all_terms: Sequence[Term],
        category: Optional[str] = None,
    ) -> QuizBatch:
        """
        Generate up to ``count`` questions, each from a different term.

        Terms are visited in random order; a term whose derivation fails is
        skipped for the rest of the call. The batch may come back short.

        Args:
            count: Desired number of questions.
            all_terms: Full term snapshot, used for eligibility and distractors.
            category: If given, only terms in this category become questions.

        Returns:
            QuizBatch with the questions and the number of skipped terms.
        """
        batch = QuizBatch(requested=max(count, 0))
        if count <= 0 or not self.can_generate(all_terms):
            return batch

        candidates = all_terms
        if category:
            candidates = [t for t in all_terms if t.category == category]

        for term in shuffle(candidates, self.rng):
            if len(batch.questions) >= count:
                break
            question = self.derive_question(term, all_terms)
            if question is None:
                logger.debug(f"Not enough distinct options for '{term.word}'")
                batch.skipped += 1
                continue
            batch.questions.append(question)

        if batch.is_short:
            logger.info(
                f"Generated {len(batch)}/{count} questions "
                f"({batch.skipped} terms skipped)"
            )
        return batch


_default_generator = QuestionGenerator()


def derive_question(target: Term, all_terms: Sequence[Term]) -> Optional[Question]:
    return _default_generator.derive_question(target, all_terms)


def generate_batch(
    count: int, all_terms: Sequence[Term], category: Optional[str] = None
) -> QuizBatch:
    return _default_generator.generate_batch(count, all_terms, category=category)


def can_generate(all_terms: Sequence[Term]) -> bool:
    return _default_generator.can_generate(all_terms)
