import random
from typing import List, Optional, Sequence, Tuple, TypeVar

from ..models.game import MultipleChoiceQuestion

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly shuffled copy of items (Fisher-Yates), leaving items untouched."""
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = (rng or random).randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def shuffle_options(question: MultipleChoiceQuestion, rng: Optional[random.Random] = None) -> Tuple[List[str], int]:
    """
    Shuffle a question's options for display.
    
    Returns:
        The options in display order and the display index of the correct one
    """
    order = shuffle(range(len(question.options)), rng)
    options = [question.options[i] for i in order]
    return options, order.index(question.correct_answer)
