"""Tests for paragraph boundary detection."""

from citation_engine.citations.paragraphs import is_heading_line, last_sentence_end, paragraph_boundaries


def test_is_heading_line():
    assert is_heading_line("# Title")
    assert is_heading_line("### Deep heading")
    assert is_heading_line("  ## Indented")
    assert is_heading_line("1. First item")
    assert is_heading_line("12. Twelfth item")
    assert not is_heading_line("#hashtag")
    assert not is_heading_line("1.5 million people")
    assert not is_heading_line("Plain sentence.")


def test_last_sentence_end():
    assert last_sentence_end("One. Two!") == len("One. Two!")
    assert last_sentence_end("Is it? Maybe so") == len("Is it?")
    assert last_sentence_end("Version 2.0 is out") is None
    assert last_sentence_end("No terminator") is None


def test_boundaries_blank_line_separation():
    text = "Sentence one. Sentence two.\n\nSentence three."
    offsets = [b.offset for b in paragraph_boundaries(text)]
    assert offsets == [len("Sentence one. Sentence two."), len(text)]


def test_multiline_paragraph_closes_on_last_line():
    text = "First line.\nSecond line.\n\nNext."
    boundaries = paragraph_boundaries(text)
    assert [b.line_index for b in boundaries] == [1, 3]


def test_paragraph_without_terminator_has_no_boundary():
    text = "Intro without a period\n\nBody text."
    boundaries = paragraph_boundaries(text)
    assert [b.offset for b in boundaries] == [len(text)]


def test_heading_after_line_closes_paragraph():
    text = "Facts here.\n## Next section\nMore facts."
    boundaries = paragraph_boundaries(text)
    assert [b.offset for b in boundaries] == [len("Facts here."), len(text)]
    assert not any(b.is_heading for b in boundaries)


def test_heading_with_terminator_is_flagged():
    text = "# Is aspirin safe?\n\nUsually, yes."
    boundaries = paragraph_boundaries(text)
    assert boundaries[0].is_heading
    assert not boundaries[1].is_heading


def test_enumerated_items_close_previous_line():
    text = "Options include:\n1. Rest.\n2. Fluids."
    boundaries = paragraph_boundaries(text)
    assert [b.line_index for b in boundaries] == [1, 2]
    assert all(b.is_heading for b in boundaries)


def test_empty_text():
    assert paragraph_boundaries("") == []
