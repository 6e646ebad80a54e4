import pytest

from repofetch.authors import Author, AuthorsInfo, compute_authors, digit_difference
from repofetch.config import NumberSeparator
from repofetch.signature import Sig

EMAIL = "john.doe@example.com"


def _john():
    return Author("John Doe", EMAIL, 1500, 2000, NumberSeparator.PLAIN)


def _roberto():
    return Author("Roberto Berto", None, 240, 300, NumberSeparator.PLAIN)


def test_display_author():
    assert str(_john()) == f"75% John Doe <{EMAIL}> 1500"


def test_display_author_with_no_email():
    author = Author("John Doe", None, 1500, 2000, NumberSeparator.PLAIN)
    assert str(author) == "75% John Doe 1500"


def test_display_author_with_separator():
    author = Author("John Doe", None, 1500, 2000, NumberSeparator.COMMA)
    assert str(author) == "75% John Doe 1,500"


def test_contribution_rounds_half_up():
    author = Author("John Doe", None, 1, 8, NumberSeparator.PLAIN)
    assert author.contribution == 13


def test_authors_info_title_with_one_author():
    assert AuthorsInfo([_john()], 1).title() == "Author"


def test_authors_info_title_with_two_authors():
    assert AuthorsInfo([_john(), _roberto()], 1).title() == "Authors"


def test_author_info_value_with_one_author():
    assert AuthorsInfo([_john()], 1).value() == f"75% John Doe <{EMAIL}> 1500"


def test_author_info_value_with_two_authors():
    info = AuthorsInfo([_john(), _roberto()], 1)
    assert info.value() == (
        f"75% John Doe <{EMAIL}> 1500\n" + " " * 9 + "80% Roberto Berto 240"
    )


def test_author_info_alignment_with_three_authors():
    jane = Author("Jane Doe", None, 1, 100, NumberSeparator.PLAIN)
    info = AuthorsInfo([_john(), _roberto(), jane], 1)
    lines = info.value().split("\n")
    assert lines[1] == " " * 9 + "80% Roberto Berto 240"
    assert lines[2] == " " * 10 + "1% Jane Doe 1"


@pytest.mark.parametrize(
    "num1, num2, expected",
    [(456, 123, 0), (456789, 123, 3), (1, 12, 1)],
)
def test_digit_difference(num1, num2, expected):
    assert digit_difference(num1, num2) == expected


def test_compute_authors():
    counts = {
        Sig("John Doe", "johndoe@example.com"): 30,
        Sig("Jane Doe", "janedoe@example.com"): 20,
        Sig("Ellen Smith", "ellensmith@example.com"): 50,
    }
    separator = NumberSeparator.COMMA
    actual = compute_authors(counts, 100, 2, False, separator)
    assert actual == [
        Author("Ellen Smith", None, 50, 100, separator),
        Author("John Doe", None, 30, 100, separator),
    ]


def test_compute_authors_ties_sorted_by_name_with_email():
    counts = {
        Sig("Zed", "zed@example.com"): 5,
        Sig("Amy", "amy@example.com"): 5,
    }
    authors = compute_authors(counts, 10, 5, True, NumberSeparator.PLAIN)
    assert [(a.name, a.email) for a in authors] == [
        ("Amy", "amy@example.com"),
        ("Zed", "zed@example.com"),
    ]


def test_from_counts_and_serialize():
    counts = {Sig("John Doe", "johndoe@example.com"): 3}
    info = AuthorsInfo.from_counts(counts, 3, 3, False, NumberSeparator.PLAIN, 1)
    assert info.serialize() == {
        "authors": [
            {"name": "John Doe", "email": None, "nbrOfCommits": 3, "contribution": 100}
        ],
        "separator_length": 1,
    }