import re
from pathlib import Path

SUPPORTED_SUFFIXES = (".pdf", ".docx", ".txt", ".md")


def load_document(file_path: str | Path) -> str:
    """Read a resume or job posting file (PDF, DOCX, TXT, MD) as clean plain text."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        raw = _read_pdf(path)
    elif suffix == ".docx":
        raw = _read_docx(path)
    elif suffix in (".txt", ".md"):
        raw = path.read_text(encoding="utf-8")
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")
    return clean_text(raw)


def clean_text(text: str) -> str:
    """Normalize extracted text before it is sent to an agent.

    Handles: BOM and zero-width characters, bullet glyphs, runs of spaces,
    trailing whitespace and long blank-line runs.
    """
    text = text.lstrip("\ufeff")
    text = re.sub(r"[\u200b\u200c\u200d\u00ad\u2060\ufeff]", "", text)

    # ●, •, ◦, ◆, ■, ▪, ★, ○ → -
    text = re.sub(r"^(\s*)[●•◦◆■▪★○]\s*", r"\1- ", text, flags=re.MULTILINE)

    lines = []
    for line in text.splitlines():
        stripped = line.strip()
        lines.append(re.sub(r"[ \t]{2,}", " ", stripped))
    text = "\n".join(lines)

    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _read_pdf(path: Path) -> str:
    import fitz  # pymupdf

    doc = fitz.open(str(path))
    try:
        return "\n".join(page.get_text() for page in doc)
    finally:
        doc.close()


def _read_docx(path: Path) -> str:
    from docx import Document

    doc = Document(str(path))
    return "\n".join(p.text for p in doc.paragraphs if p.text.strip())
