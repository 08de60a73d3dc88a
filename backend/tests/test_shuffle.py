import random
from collections import Counter
from itertools import permutations

from geohistory.models.game import MultipleChoiceQuestion
from geohistory.services.shuffle import shuffle, shuffle_options


def test_shuffle_returns_new_list_and_keeps_input():
    items = ("a", "b", "c", "d")
    result = shuffle(items, random.Random(1))
    assert items == ("a", "b", "c", "d")
    assert sorted(result) == ["a", "b", "c", "d"]

    original = [1, 2, 3]
    assert shuffle(original, random.Random(2)) is not original
    assert original == [1, 2, 3]


def test_shuffle_handles_short_sequences():
    assert shuffle([]) == []
    assert shuffle(["only"]) == ["only"]


def test_every_permutation_is_roughly_equally_likely():
    rng = random.Random(2024)
    runs = 24000
    counts = Counter(tuple(shuffle("abcd", rng)) for _ in range(runs))
    assert set(counts) == set(permutations("abcd"))
    for count in counts.values():
        assert 800 <= count <= 1200


def test_shuffled_options_track_the_correct_answer():
    rng = random.Random(11)
    for correct in range(4):
        question = MultipleChoiceQuestion(
            question="Who signed the armistice?",
            options=["Foch", "Haig", "Pershing", "Ludendorff"],
            correct_answer=correct,
        )
        for _ in range(200):
            options, correct_index = shuffle_options(question, rng)
            assert sorted(options) == sorted(question.options)
            assert options[correct_index] == question.options[correct]
        assert question.options == ["Foch", "Haig", "Pershing", "Ludendorff"]
