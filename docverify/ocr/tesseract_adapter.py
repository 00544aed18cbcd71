import io

import pytesseract
from PIL import Image

from docverify.ocr.base import BaseTextExtractor
from docverify.ocr.exceptions import TextExtractionError
from docverify.ocr.models import OcrResult


class TesseractTextExtractor(BaseTextExtractor):
    """Extracts text with Tesseract via pytesseract's word-level data output."""

    def __init__(self, *, timeout_seconds: float = 0, tesseract_cmd: str = "") -> None:
        self._timeout_seconds = timeout_seconds
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def extract(self, image_bytes: bytes, lang: str = "eng") -> OcrResult:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                data = pytesseract.image_to_data(
                    image,
                    lang=lang,
                    output_type=pytesseract.Output.DICT,
                    timeout=self._timeout_seconds,
                )
        except Exception as exc:
            raise TextExtractionError(f"tesseract extraction failed: {exc}") from exc
        return self._build_result(data)

    @staticmethod
    def _build_result(data: dict[str, list[object]]) -> OcrResult:
        confidences: list[float] = []
        line_words: dict[tuple[int, int, int], list[str]] = {}
        blocks: set[int] = set()

        for i, raw_text in enumerate(data.get("text", [])):
            word = str(raw_text).strip()
            conf = float(data["conf"][i])  # type: ignore[arg-type]
            if not word or conf < 0:
                continue
            block = int(data["block_num"][i])  # type: ignore[call-overload]
            line_key = (
                block,
                int(data["par_num"][i]),  # type: ignore[call-overload]
                int(data["line_num"][i]),  # type: ignore[call-overload]
            )
            confidences.append(conf / 100.0)
            line_words.setdefault(line_key, []).append(word)
            blocks.add(block)

        text = "\n".join(" ".join(words) for words in line_words.values())
        return OcrResult.from_words(
            text,
            confidences,
            lines=len(line_words),
            blocks=len(blocks),
        )
