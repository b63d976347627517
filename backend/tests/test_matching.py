import pytest

from engines.matching import MAX_DISTANCE, candidate_answers, levenshtein_distance, score


class TestLevenshtein:
    def test_identical(self):
        assert levenshtein_distance("libro", "libro") == 0

    def test_empty(self):
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3

    def test_single_edits(self):
        assert levenshtein_distance("palabra", "palabre") == 1
        assert levenshtein_distance("palabra", "palabr") == 1
        assert levenshtein_distance("libro", "libros") == 1

    def test_classic(self):
        assert levenshtein_distance("kitten", "sitting") == 3


class TestCandidates:
    def test_no_alternatives_adds_empty_candidate(self):
        assert candidate_answers("Palabra ", None) == ["palabra", ""]
        assert candidate_answers("Palabra ", "") == ["palabra", ""]

    def test_alternatives_are_trimmed_and_lowered(self):
        assert candidate_answers("comprendimos", "Entendemos,  intiendemos") == [
            "comprendimos", "entendemos", "intiendemos",
        ]

    def test_empty_tokens_kept(self):
        assert candidate_answers("amor", "cariño,, ") == ["amor", "cariño", "", ""]


class TestScore:
    def test_exact_target(self):
        assert score("comprendimos", "entendemos, intiendemos", "comprendimos") == 0

    def test_exact_alternative(self):
        assert score("comprendimos", "entendemos, intiendemos", "intiendemos") == 0

    def test_one_off_alternative(self):
        assert score("comprendimos", "entendemos, intiendemos", "intiendemo") == 1

    def test_case_and_whitespace_ignored(self):
        assert score("La gata es muy inteligente", None, "  la GATA es muy inteligente ") == 0

    def test_empty_guess_is_worst(self):
        assert score("palabra", None, "") == MAX_DISTANCE
        assert score("palabra", None, "   ") == MAX_DISTANCE

    def test_unrelated_guess_is_clamped(self):
        assert score("La gata es muy inteligente", None, "This isn't even spanish!") == MAX_DISTANCE

    def test_single_character_guess_matches_empty_alternative(self):
        assert score("palabra", "", "a") == 1
        assert score("palabra", None, "a") == 1
        assert score("comprendimos", "entendemos,", "a") == 1

    def test_single_character_guess_without_empty_alternative(self):
        assert score("comprendimos", "entendemos, intiendemos", "a") == MAX_DISTANCE

    @pytest.mark.parametrize("guess", ["", "p", "pal", "palabra", "palabras", "xyz" * 10])
    def test_always_within_bounds(self, guess):
        assert 0 <= score("palabra", "vocablo", guess) <= MAX_DISTANCE
