from docintake.pdf.budget import Deadline, unbounded
from docintake.pdf.commands import (
    TEXT_COMMAND_PATTERNS,
    SpanSet,
    clean_text_block,
    clean_tj_array,
    extract_fragments,
    is_prose_fragment,
    scan_pattern,
)


def _pattern(name):
    return next(p for p in TEXT_COMMAND_PATTERNS if p.name == name)


def test_span_set_rejects_overlaps():
    spans = SpanSet()
    assert spans.add(0, 10)
    assert spans.overlaps(5, 15)
    assert not spans.overlaps(10, 20)
    assert spans.add(10, 20)
    assert not spans.add(3, 4)
    assert spans.overlaps(-5, 1)
    assert len(spans) == 2


def test_tj_array_joins_kerned_runs():
    assert clean_tj_array("(Hel) -20 (lo) 15 (World)") == "HelloWorld"
    assert clean_tj_array("<48656C6C6F> -250 (!)") == "Hello!"


def test_text_block_keeps_source_order():
    block = " /F1 12 Tf 72 700 Td (First line) Tj [(Sec) -5 (ond)] TJ "
    assert clean_text_block(block) == "First line Second"


def test_text_block_decodes_escapes_once():
    assert clean_text_block(r" (Smith \(Trustee\)) Tj ") == "Smith (Trustee)"


def test_fragments_are_not_captured_twice():
    text = "BT /F1 12 Tf 72 712 Td (Hello World) Tj ET"
    assert extract_fragments(text, max_matches=100, deadline=unbounded()) == ["Hello World"]


def test_fragments_outside_text_blocks_still_found():
    text = "BT (Hello World) Tj ET\n(Second fragment here) Tj"
    fragments = extract_fragments(text, max_matches=100, deadline=unbounded())
    assert fragments == ["Hello World", "Second fragment here"]


def test_extract_fragments_limit():
    text = "(alpha beta) Tj " * 10
    assert len(extract_fragments(text, max_matches=100, deadline=unbounded(), limit=3)) == 3


def test_scan_pattern_caps_examined_matches():
    text = "(alpha beta) Tj " * 10
    found = list(scan_pattern(text, _pattern("show_string"), spans=SpanSet(), max_matches=3, deadline=unbounded()))
    assert found == ["alpha beta"] * 3


def test_scan_pattern_skips_invalid_fragments():
    text = "(12345) Tj (Readable words) Tj"
    found = list(scan_pattern(text, _pattern("show_string"), spans=SpanSet(), max_matches=10, deadline=unbounded()))
    assert found == ["Readable words"]


def test_exhausted_deadline_stops_extraction(clock):
    text = "(alpha beta) Tj " * 10
    assert extract_fragments(text, max_matches=100, deadline=Deadline(0, clock=clock)) == []


def test_hex_show_strings_are_decoded():
    assert clean_text_block(" /F1 12 Tf 72 712 Td <48656C6C6F20576F726C64> Tj ") == "Hello World"
    text = "<4E6F74696365206F6620686561 72696E67> Tj"
    assert extract_fragments(text, max_matches=100, deadline=unbounded()) == ["Notice of hearing"]


def test_balanced_parentheses_stay_inside_the_string():
    text = "(The court (sitting en banc) ruled today) Tj"
    assert clean_text_block(" " + text + " ") == "The court (sitting en banc) ruled today"
    assert extract_fragments(text, max_matches=100, deadline=unbounded()) == ["The court (sitting en banc) ruled today"]


def test_loose_parentheses_need_whole_words():
    assert not is_prose_fragment("oro A")
    assert not is_prose_fragment("5Hz j")
    assert not is_prose_fragment("TuV5 C We")
    assert is_prose_fragment("Notice of hearing")
    text = "(oro A) junk (5Hz j) more (Notice of hearing)"
    assert extract_fragments(text, max_matches=100, deadline=unbounded()) == ["Notice of hearing"]
