"""Fragment loader — reads notes and fragment records from a directory.

Plain text, Markdown and PDF files become one fragment each. JSON files
hold a list of fragment records (``id``, ``title``, ``content`` and the
optional ``summary``, ``tags``, ``parent_id``, ``pinned``).
"""

import html
import json
import logging
import re
from pathlib import Path
from typing import Callable

import markdown
from pydantic import TypeAdapter
from pypdf import PdfReader

from kb_context.models import Fragment

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(list[Fragment])
_TAG_RE = re.compile(r"<[^>]+>")


def _load_txt(file_path: Path) -> str:
    """Fragment content of a plain-text note; a leading byte-order mark is dropped."""
    return file_path.read_text(encoding="utf-8-sig")


def _load_pdf(file_path: Path) -> str:
    """Fragment content of a PDF: the text of each page, pages separated by a blank line.

    Pages without extractable text (scanned images, blank pages) are dropped.
    """
    reader = PdfReader(str(file_path))
    pages = (page.extract_text() or "" for page in reader.pages)
    return "\n\n".join(text.strip() for text in pages if text.strip())


def _load_markdown(file_path: Path) -> str:
    """Fragment content of a Markdown note as plain text.

    The source is rendered to HTML, tags are removed and entities such as
    ``&amp;`` are decoded, so the tokenizer sees the words a reader sees.
    """
    rendered = markdown.markdown(file_path.read_text(encoding="utf-8"))
    return html.unescape(_TAG_RE.sub("", rendered))


def _load_records(file_path: Path) -> list[Fragment]:
    """Parse a JSON file holding a list of fragment records.

    Raises:
        ValueError: If the file is not valid JSON or a record does not
            match the Fragment shape.
    """
    records = json.loads(file_path.read_text(encoding="utf-8"))
    return _records_adapter.validate_python(records)


# Supported text file extensions mapped to their loader functions.
LOADERS: dict[str, Callable[[Path], str]] = {
    ".txt": _load_txt,
    ".pdf": _load_pdf,
    ".md": _load_markdown,
}


def load_fragments(folder_path: str | Path) -> list[Fragment]:
    """Load all supported files from a folder as fragments.

    Text files become one fragment each, with the file name as id and the
    file stem as title. JSON files contribute every record they hold.
    Empty files and files that fail to load are skipped with a warning.

    Args:
        folder_path: Path to the directory containing the files.

    Returns:
        Fragments in file-name order, records of a JSON file in file order.

    Raises:
        FileNotFoundError: If the folder does not exist.
        NotADirectoryError: If the path is not a directory.
    """
    folder = Path(folder_path)
    if not folder.exists():
        raise FileNotFoundError(f"Folder not found: {folder_path}")
    if not folder.is_dir():
        raise NotADirectoryError(f"Not a directory: {folder_path}")

    fragments: list[Fragment] = []

    for file_path in sorted(folder.iterdir()):
        if not file_path.is_file():
            continue

        ext = file_path.suffix.lower()
        try:
            if ext == ".json":
                records = _load_records(file_path)
                fragments.extend(records)
                logger.info("Loaded %d records: %s", len(records), file_path.name)
                continue

            loader = LOADERS.get(ext)
            if loader is None:
                continue

            content = loader(file_path)
            if not content.strip():
                logger.warning("Skipping empty file: %s", file_path.name)
                continue

            fragments.append(
                Fragment(id=file_path.name, title=file_path.stem, content=content.strip())
            )
            logger.info("Loaded: %s", file_path.name)
        except Exception:
            logger.exception("Failed to load %s", file_path.name)

    return fragments
