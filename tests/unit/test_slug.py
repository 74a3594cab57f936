from video_catalog.slug import slugify


def test_slugify_lowercases_and_hyphenates_whitespace() -> None:
    assert slugify("  My First   Video ") == "my-first-video"


def test_slugify_strips_diacritics() -> None:
    assert slugify("Café Crème Brûlée") == "cafe-creme-brulee"


def test_slugify_drops_punctuation_and_collapses_hyphens() -> None:
    assert slugify("Hello, World! -- Part 2") == "hello-world-part-2"


def test_slugify_drops_non_ascii_word_characters() -> None:
    assert slugify("日本 video") == "-video"


def test_slugify_accepts_non_strings() -> None:
    assert slugify(42) == "42"
