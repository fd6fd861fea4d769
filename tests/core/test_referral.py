"""Referral codes — prefix from the name, four random digits."""

import random
import re

from kringp.core.referral import generate_referral_code


def test_code_is_four_letters_and_four_digits():
    assert re.fullmatch(r"[A-Z]{4}\d{4}", generate_referral_code("Priya Sharma"))


def test_prefix_strips_non_letters_and_uppercases():
    assert generate_referral_code("jo-hn smith", random.Random(7)).startswith("JOHN")


def test_short_name_is_padded_with_x():
    assert generate_referral_code("Al", random.Random(1)).startswith("ALXX")


def test_missing_name_gives_all_x_prefix():
    assert generate_referral_code(None, random.Random(1)).startswith("XXXX")


def test_digits_are_zero_padded():
    class _Zero(random.Random):
        def randint(self, a, b):
            return 7

    assert generate_referral_code("Maya", _Zero()) == "MAYA0007"
