import dataclasses

from docintake.pdf.fallback import build_summary, classify_document
from docintake.pdf.structure import analyze_structure
from docintake.pdf.types import ExtractionMethod, StructureAnalysis


def test_classify_document_first_match_wins():
    assert classify_document(b"FIRST SET OF DISCOVERY; INTERROGATORIES") == "Discovery Request Document"
    assert classify_document(b"ANSWERS TO INTERROGATORIES") == "Interrogatory Document"
    assert classify_document(b"MOTION TO COMPEL") == "Court Filing Document"
    assert classify_document(b"LEASE AGREEMENT") == "Contract/Agreement Document"
    assert classify_document(b"\x00\x01\x02") == "Legal Document"


def test_summary_for_empty_buffer():
    result = build_summary(b"", StructureAnalysis.empty(), [], reason="Empty PDF buffer")
    assert result.method is ExtractionMethod.FALLBACK_SUMMARY
    assert result.quality == 0.5
    assert result.confidence == 0.6
    assert result.page_count == 1
    assert result.text.startswith("DOCUMENT ANALYSIS SUMMARY")
    assert "Processing Issue: Empty PDF buffer" in result.text
    assert "- None (no extraction strategy could be run)" in result.text
    assert result.notes == ("Summary fallback after 0 strategies", "Empty PDF buffer")


def test_summary_lists_attempts_and_structure(sample_pdf, sample_structure):
    attempted = [ExtractionMethod.TEXT_OBJECTS, ExtractionMethod.STREAMS]
    result = build_summary(sample_pdf, sample_structure, attempted)
    assert f"({len(sample_pdf)} bytes)" in result.text
    assert "- Objects: 5" in result.text
    assert "- Text Objects: 1" in result.text
    assert "- Compression: None detected" in result.text
    assert "- Text object extraction (BT/ET, Tj/TJ operators)" in result.text
    assert "- Stream extraction (ASCII85 / ASCIIHex / raw)" in result.text
    assert "OCR" not in result.text


def test_summary_recommends_ocr_for_scanned_documents():
    structure = dataclasses.replace(StructureAnalysis.empty(200_000), images=4)
    result = build_summary(b"\x00" * 200_000, structure, [])
    assert result.is_scanned
    assert result.page_count == 4
    assert "OCR processing is recommended" in result.text


def test_summary_is_deterministic():
    buf = b"%PDF-1.7\n1 0 obj << /Filter /FlateDecode >> endobj\nCOURT"
    s = analyze_structure(buf)
    assert build_summary(buf, s, [ExtractionMethod.RAW_TEXT_SCAN]) == build_summary(buf, s, [ExtractionMethod.RAW_TEXT_SCAN])


def test_results_are_hashable_with_tuple_notes():
    result = build_summary(b"", StructureAnalysis.empty(), [], reason="Empty PDF buffer")
    assert isinstance(result.notes, tuple)
    assert hash(result) == hash(build_summary(b"", StructureAnalysis.empty(), [], reason="Empty PDF buffer"))
    assert len({result, dataclasses.replace(result, notes=["copied"])}) == 2
    assert dataclasses.replace(result, notes=["copied"]).notes == ("copied",)
