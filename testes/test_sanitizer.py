from news_migration.parsers.sanitizer import clean_up, is_blank_text


def test_line_breaks_are_removed():
    assert clean_up("<p>one\r\ntwo</p>\n") == "<p>onetwo</p>"


def test_nbsp_only_paragraphs_are_removed():
    html = "<p>Keep</p><p>&nbsp;</p><p>\xa0</p><p class=\"x\">&nbsp;</p>"
    assert clean_up(html) == "<p>Keep</p>"


def test_paragraph_with_text_and_nbsp_is_kept():
    assert clean_up("<p>a&nbsp;b</p>") == "<p>a&nbsp;b</p>"


def test_double_wrapped_paragraphs_are_collapsed():
    assert clean_up("<p><p>Text</p></p>") == "<p>Text</p>"
    assert clean_up("<p><p><p>Deep</p></p></p>") == "<p>Deep</p>"


def test_double_open_keeps_outer_attributes():
    assert clean_up('<p class="lead"><p>Text</p></p>') == '<p class="lead">Text</p>'


def test_collapse_after_line_break_removal():
    assert clean_up("<p>\n<p>Text</p>\r\n</p>") == "<p>Text</p>"


def test_empty_input():
    assert clean_up("") == ""
    assert clean_up(None) == ""


def test_blank_text():
    assert is_blank_text("  ")
    assert is_blank_text("\xa0")
    assert is_blank_text(" \xa0 ")
    assert not is_blank_text("x")
