from fastapi import UploadFile
from markupsafe import escape

from src.utils.schemas import FileData


DEFAULT_FILENAME = "upload.bin"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def text_to_html(text: str | None) -> str:
    """Wrap plain text in a paragraph, turning newlines into <br>.

    Markup in the text is escaped, so HTML typed into the form arrives as
    literal text rather than being rendered.
    """
    escaped = str(escape(text or "")).replace("\r\n", "\n")
    return "<p>" + escaped.replace("\n", "<br>") + "</p>"


async def read_upload(file: UploadFile) -> FileData:
    """Read an uploaded file into memory"""
    content = await file.read()
    return FileData(
        filename=file.filename or DEFAULT_FILENAME,
        content_type=file.content_type or DEFAULT_CONTENT_TYPE,
        content=content,
        size=len(content),
    )
