"""Save a generated script as a plain-text file."""

import re
from pathlib import Path
from typing import Optional, Union

import aiofiles

from selfintro.schemas.generation import GenerationRecord

DEFAULT_EXPORT_TITLE = "自我介紹"

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def safe_filename(title: str) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", title).strip().strip(".")
    return cleaned or DEFAULT_EXPORT_TITLE


async def download_text(
    source: Union[GenerationRecord, str],
    directory: Union[str, Path],
    title: Optional[str] = None,
) -> Path:
    """Write the generated text to <directory>/<title>.txt and return the path."""
    if isinstance(source, GenerationRecord):
        text = source.generated_text
        title = title or source.project_title
    else:
        text = source

    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / f"{safe_filename(title or DEFAULT_EXPORT_TITLE)}.txt"

    async with aiofiles.open(path, "w", encoding="utf-8") as f:
        await f.write(text)
    return path
